"""
TTL policy: decides whether a channel's cached entries are stale.
"""

from datetime import datetime
from typing import Optional

from feed_aggregator.utils.time_utils import to_naive_utc, utcnow


def is_refresh_needed(
    ttl: Optional[int],
    last_refresh: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """Determine if a channel's TTL has expired and its feed must be fetched.

    A channel without a TTL or that was never refreshed is always stale.
    Otherwise it is stale once strictly more than ``ttl`` seconds have
    elapsed since ``last_refresh``; exactly ``ttl`` seconds is still fresh.

    Args:
        ttl: Freshness window in seconds
        last_refresh: Time of the last refresh
        now: Reference time (defaults to the current UTC time)

    Returns:
        True if the channel must be refreshed
    """
    if ttl is None or last_refresh is None:
        return True

    now = to_naive_utc(now) if now is not None else utcnow()
    elapsed = now - to_naive_utc(last_refresh)

    return elapsed.total_seconds() > ttl
