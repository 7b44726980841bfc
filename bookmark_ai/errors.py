"""Error types raised by the bookmark analysis core."""


class BookmarkAIError(Exception):
    """Base class for all errors surfaced to callers."""


class ConfigurationError(BookmarkAIError):
    """The API credential (or other required setting) is missing."""


class ValidationError(BookmarkAIError):
    """Caller input was rejected before any network I/O."""


class UpstreamError(BookmarkAIError):
    """The completion endpoint answered with a non-success status or could not be reached."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(BookmarkAIError):
    """The model output could not be decoded, even after repair."""
