"""
Timestamp helpers.

All timestamps are stored and compared as naive datetimes in UTC.
"""

import time
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert a datetime to naive UTC.

    Naive inputs are assumed to already be UTC and are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def struct_time_to_datetime(value: Optional[time.struct_time]) -> Optional[datetime]:
    """Convert a feedparser ``*_parsed`` struct_time (always UTC) to a naive datetime."""
    if not value:
        return None
    try:
        return datetime(*value[:6])
    except (TypeError, ValueError):
        return None
