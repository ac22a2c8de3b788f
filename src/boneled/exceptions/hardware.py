"""Hardware-related exceptions.

- HardwareError: Base class for pin access errors
- HardwareUnavailableError: GPIO library or board is not available
"""

from .base import BoneLedError


class HardwareError(BoneLedError):
    """Pin access failed."""

    def __init__(self, user_message: str, pin: str | None = None, **kwargs):
        """
        Initialize hardware error.

        Args:
            user_message: User-friendly error message
            pin: The pin involved (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.pin = pin


class HardwareUnavailableError(HardwareError):
    """The GPIO backend cannot be used on this machine."""

    def __init__(self, backend: str, original_error: str | None = None):
        """
        Initialize hardware-unavailable error.

        Args:
            backend: Name of the backend that failed to load
            original_error: The original error message from the import or probe
        """
        user_msg = f"GPIO backend '{backend}' is not available on this machine."
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        recovery = (
            "Install the board support with 'pip install boneled[beaglebone]' on the "
            "BeagleBone, or start with '--backend memory' to run without hardware."
        )

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint=recovery,
        )
        self.backend = backend
