"""
Exception hierarchy for the aggregation engine.

The engine never retries or swallows these; they reach the caller unchanged.
"""

from typing import Optional


class AggregatorError(Exception):
    """Base class for all feed aggregator errors."""


class ChannelNotFoundError(AggregatorError):
    """Raised when a channel id has no registry entry."""

    def __init__(self, channel_id: int):
        self.channel_id = channel_id
        super().__init__(f"Unknown channel [id: {channel_id}]")


class InvalidSourceError(AggregatorError):
    """Raised when a channel URL does not yield a parseable RSS/Atom feed.

    Covers unreachable endpoints, HTTP errors and content that is not a
    syndication document.
    """

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        message = f"The channel's URL isn't a valid feed source [url: {url}]"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


__all__ = [
    "AggregatorError",
    "ChannelNotFoundError",
    "InvalidSourceError",
]
