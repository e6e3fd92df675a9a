"""Domain exceptions for the newsdesk request pipeline."""


class NewsdeskError(Exception):
    """Base class for errors surfaced to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NewsdeskError):
    """Raised when an inbound request is rejected before any side effect."""


class ModelInvocationError(NewsdeskError):
    """Raised when the generative model call fails or returns nothing usable."""


class ModelTimeoutError(ModelInvocationError):
    """Raised when the generative model call exceeds its timeout."""


class ExtractionError(NewsdeskError):
    """Raised when a frame cannot be extracted from a video."""


class TimestampParseError(ExtractionError):
    """Raised when a timestamp string does not describe a usable offset."""


class ExtractionTimeoutError(ExtractionError):
    """Raised when ffmpeg exceeds its timeout."""


class FeedbackBackendError(NewsdeskError):
    """Raised by the remote feedback store. Never reaches API callers."""
