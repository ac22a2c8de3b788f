"""Device and registry exceptions.

- RegistryError: A registry query or store operation failed
- DeviceError: Base class for live device errors
- DeviceNotFoundError: No live device with the given id
- TransitionNotAllowedError: Transition is not allowed from the current state
- TransitionInProgressError: Another transition is still running
"""

from .base import BoneLedError


class RegistryError(BoneLedError):
    """Device registry operation failed."""
    pass


class DeviceError(BoneLedError):
    """Live device operation failed."""

    def __init__(self, user_message: str, device_id: str | None = None, **kwargs):
        super().__init__(user_message, **kwargs)
        self.device_id = device_id


class DeviceNotFoundError(DeviceError):
    """Requested device is not registered."""

    def __init__(self, device_id: str):
        super().__init__(
            f"Device {device_id} not found.",
            device_id=device_id,
            recoverable=True,
            recovery_hint="Run 'boneled devices list' to see registered devices.",
        )


class TransitionNotAllowedError(DeviceError):
    """Transition is not allowed in the device's current state."""

    def __init__(self, device_id: str, transition: str, state: str | None):
        super().__init__(
            f"Transition '{transition}' is not allowed in state '{state}'.",
            device_id=device_id,
            recoverable=True,
        )
        self.transition = transition
        self.state = state


class TransitionInProgressError(DeviceError):
    """A transition is already running on the device."""

    def __init__(self, device_id: str, transition: str):
        super().__init__(
            f"Device {device_id} is busy, cannot run '{transition}'.",
            device_id=device_id,
            recoverable=True,
            recovery_hint="Retry once the current transition has completed.",
        )
        self.transition = transition
