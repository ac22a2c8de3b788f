"""In-memory GPIO backend.

Simulates a board so the server can run on a workstation. Every call is
recorded in order, which also makes it the backend of choice in tests.
"""

import logging
from dataclasses import dataclass, field

from .protocols import PinLevel, PinMode, PlatformInfo

logger = logging.getLogger(__name__)


@dataclass
class PinCall:
    """One recorded primitive call."""

    op: str
    pin: str
    value: str | int


@dataclass
class MemoryPinAccessor:
    """Simulated BeagleBone pin header."""

    platform_name: str = "Simulated BeagleBone"
    modes: dict[str, PinMode] = field(default_factory=dict)
    levels: dict[str, PinLevel] = field(default_factory=dict)
    calls: list[PinCall] = field(default_factory=list)

    def pin_mode(self, pin: str, mode: PinMode) -> None:
        self.modes[pin] = mode
        self.calls.append(PinCall("pin_mode", pin, mode))

    def digital_write(self, pin: str, value: PinLevel) -> None:
        self.levels[pin] = value
        self.calls.append(PinCall("digital_write", pin, value))
        logger.debug(f"[sim] {pin} <- {value}")

    async def get_platform(self) -> PlatformInfo:
        return PlatformInfo(name=self.platform_name, backend="memory")

    def writes(self, pin: str) -> list[int]:
        """Values written to a pin, oldest first."""
        return [c.value for c in self.calls if c.op == "digital_write" and c.pin == pin]
