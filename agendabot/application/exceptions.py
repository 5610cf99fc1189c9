class ValidationError(ValueError):
    """Raised when a user utterance does not match what the current dialogue step expects."""

    def __init__(self, message: str, example: str | None = None) -> None:
        super().__init__(message)
        self.example = example


class CalendarUnavailable(RuntimeError):
    """Raised when busy intervals or bookings cannot be read from the calendar."""
    pass


class BookingFailed(RuntimeError):
    """Raised when the calendar rejects an insert or delete."""
    pass


class TranscriptionFailed(RuntimeError):
    """Raised when an audio attachment cannot be downloaded or transcribed."""
    pass


class IntentDetectionFailed(RuntimeError):
    pass


class MessageDeliveryFailed(RuntimeError):
    pass


class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class UpstreamAuthError(RuntimeError):
    """Raised when collaborator credentials are missing or cannot be exchanged for a token."""
    pass
