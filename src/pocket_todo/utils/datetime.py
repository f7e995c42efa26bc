"""Datetime utilities with consistent UTC timezone handling.

Timestamps are stored as whole Unix epoch seconds, so every datetime the
application creates is UTC-aware and truncated to the second.
"""

from datetime import datetime, timezone
from typing import Optional

LOCAL_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_utc() -> datetime:
    """Return current datetime in UTC, truncated to whole seconds.

    Returns:
        Current datetime with timezone=UTC and microsecond=0
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming UTC if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt


def to_timestamp(dt: Optional[datetime]) -> Optional[int]:
    """Convert datetime to integer Unix epoch seconds.

    Args:
        dt: Datetime to convert, or None

    Returns:
        Seconds since the epoch, or None if input was None
    """
    if dt is None:
        return None
    return int(ensure_aware(dt).timestamp())


def from_timestamp(seconds: Optional[int]) -> Optional[datetime]:
    """Convert Unix epoch seconds to a UTC datetime."""
    if seconds is None:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def format_local(dt: datetime, fmt: str = LOCAL_DISPLAY_FORMAT) -> str:
    """Format a datetime in the machine's local timezone."""
    return ensure_aware(dt).astimezone().strftime(fmt)
