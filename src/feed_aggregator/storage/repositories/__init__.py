"""Repository pattern implementations for data access."""

from feed_aggregator.storage.repositories.channel_repo import ChannelRepository
from feed_aggregator.storage.repositories.entry_repo import EntryRepository

__all__ = [
    "ChannelRepository",
    "EntryRepository",
]
