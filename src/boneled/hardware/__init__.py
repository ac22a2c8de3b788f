"""GPIO backends behind the PinAccessor protocol."""

from boneled.models import GpioBackend

from .memory import MemoryPinAccessor
from .protocols import PinAccessor, PinLevel, PinMode, PlatformInfo


def create_pin_accessor(backend: GpioBackend | str) -> PinAccessor:
    """
    Build the pin accessor for a backend name.

    Raises:
        HardwareUnavailableError: If the bbio backend cannot be loaded
        ValueError: If the backend name is unknown
    """
    backend = GpioBackend(backend)
    if backend is GpioBackend.BBIO:
        from .bbio import BBIOPinAccessor

        return BBIOPinAccessor()
    return MemoryPinAccessor()


__all__ = [
    "MemoryPinAccessor",
    "PinAccessor",
    "PinLevel",
    "PinMode",
    "PlatformInfo",
    "create_pin_accessor",
]
