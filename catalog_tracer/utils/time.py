"""Time helpers shared by the write path and tests."""

from __future__ import annotations

from datetime import datetime, timezone
from time import monotonic


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp.

    Change records are stored with UTC timestamps, so every record produced by
    one mutation must take its ``changed_at`` from a single call to this.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Deadline:
    """Time budget shared by every query of one read request."""

    def __init__(self, timeout_seconds: float | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._expires_at: float | None = None
        if timeout_seconds is not None:
            self._expires_at = monotonic() + timeout_seconds

    def remaining(self) -> float | None:
        """Return seconds left, or None when unbounded."""
        if self._expires_at is None:
            return None
        return max(self._expires_at - monotonic(), 0.0)

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0
