"""Server startup exceptions."""

from .base import BoneLedError


class ListenerStartError(BoneLedError):
    """The HTTP listener could not be started."""

    def __init__(self, host: str, port: int, original_error: str | None = None):
        """
        Initialize listener start error.

        Args:
            host: Host the listener tried to bind
            port: Port the listener tried to bind
            original_error: The original socket error message
        """
        user_msg = f"Could not start server on {host}:{port}."
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        recovery = None
        if original_error and "address already in use" in original_error.lower():
            recovery = f"Port {port} is in use. Stop the other process or pass '--port'."

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recovery_hint=recovery,
        )
        self.host = host
        self.port = port
