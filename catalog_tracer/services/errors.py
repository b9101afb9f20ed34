"""Domain errors raised by the change-tracking services."""


class TracerError(Exception):
    """Base class for change-tracking failures."""


class InvalidChangeError(TracerError, ValueError):
    """Raised when a change record is rejected at append time."""


class StoreUnavailableError(TracerError):
    """Raised when the change store or catalog tables cannot be queried.

    Callers must keep this distinct from an empty result.
    """


class QueryTimeoutError(TracerError):
    """Raised when a read exceeds its caller-supplied time budget."""
