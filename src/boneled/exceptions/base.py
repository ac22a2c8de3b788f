"""Root of the boneled exception hierarchy."""

from typing import Optional


class BoneLedError(Exception):
    """
    Base exception for all boneled errors.

    Carries two renderings of the same failure: ``user_message`` for the
    CLI banner and HTTP error bodies, ``technical_message`` for log files.

    Attributes:
        user_message: Short message safe to show to an operator
        technical_message: Detailed message for logs (defaults to user_message)
        recoverable: True if retrying or changing input can succeed
        recovery_hint: What the operator can do about it, if anything
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, if there is one."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
