"""Pin access protocol shared by the GPIO backends."""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

from pydantic import BaseModel, Field

PinMode = Literal["in", "out"]
PinLevel = Literal[0, 1]


class PlatformInfo(BaseModel):
    """Board details reported once platform detection completes."""

    name: str = Field(description="Board model string (e.g. 'TI AM335x BeagleBone Black')")
    backend: str = Field(description="Backend that answered the probe")


@runtime_checkable
class PinAccessor(Protocol):
    """
    Protocol for digital pin access.

    Implementations wrap a hardware-abstraction library and expose only
    the primitives an output device needs. Writes are treated as
    infallible by callers.
    """

    def pin_mode(self, pin: str, mode: PinMode) -> None:
        """
        Configure a pin's direction.

        Args:
            pin: Header label (e.g. "P9_12")
            mode: "out" for outputs, "in" for inputs
        """
        ...

    def digital_write(self, pin: str, value: PinLevel) -> None:
        """
        Drive an output pin low (0) or high (1).

        Args:
            pin: Header label
            value: Logical level
        """
        ...

    async def get_platform(self) -> PlatformInfo:
        """Resolve once the board has been detected."""
        ...
