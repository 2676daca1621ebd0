"""
Clock seam for timestamp generation.

Every function that stamps a record accepts an optional ``clock`` callable.
Passing ``None`` uses the wall clock; tests inject a deterministic one.
"""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def resolve_clock(clock: Clock | None) -> Clock:
    """Return ``clock`` or the wall clock when none is given."""
    return clock if clock is not None else utc_now
