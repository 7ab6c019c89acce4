"""Root of the promised-models exception hierarchy."""


class PromisedModelsError(Exception):
    """
    Base exception for all promised-models errors.

    ``str(error)`` is the short message meant for people; the longer
    ``technical_message`` is what gets logged.

    Attributes:
        user_message: Short, human-readable description
        technical_message: Detailed description for logs
        recoverable: True if correcting the input and retrying can succeed
        recovery_hint: What to change before retrying, if known
    """

    def __init__(
        self,
        user_message: str,
        technical_message: str | None = None,
        recoverable: bool = False,
        recovery_hint: str | None = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """Get the user message followed by the recovery hint, if any."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
