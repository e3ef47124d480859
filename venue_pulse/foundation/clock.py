"""Clock and calendar helpers.

Timestamps are stored and compared as UTC-aware datetimes.  Modules import
utc_now() from here and tests patch it where it is imported.  Calendar
fields follow the Sunday = 0 day numbering used throughout scoring.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def day_of_week(value: datetime) -> int:
    """Calendar day index with Sunday = 0 … Saturday = 6."""
    return (value.weekday() + 1) % 7
