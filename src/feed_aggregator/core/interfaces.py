"""
Collaborator contracts used by the refresh and aggregation engine.

The engine only depends on these abstractions. SQL-backed implementations
live in :mod:`feed_aggregator.storage.registry` and the HTTP reader in
:mod:`feed_aggregator.core.reader`.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from feed_aggregator.models import Channel, FeedEntry


class ChannelRegistry(ABC):
    """Read access to subscribed channels plus refresh-time bookkeeping."""

    @abstractmethod
    def get(self, channel_id: int) -> Channel:
        """Return the channel.

        Raises:
            ChannelNotFoundError: If no channel has this id
        """
        ...

    @abstractmethod
    def list(self) -> list[Channel]:
        ...

    @abstractmethod
    def set_last_refresh(self, channel_id: int, when: datetime) -> None:
        ...


class EntryStore(ABC):
    """Persistent storage of feed entries."""

    @abstractmethod
    def find_by_channels(self, channel_ids: Iterable[int]) -> list[FeedEntry]:
        ...

    @abstractmethod
    def find_all(self) -> list[FeedEntry]:
        ...

    @abstractmethod
    def save_all(self, entries: Iterable[FeedEntry]) -> None:
        """Persist entries in one batch.

        Implementations must tolerate entries whose link is already stored
        for the same channel.
        """
        ...

    @abstractmethod
    def delete_by_channels(self, channel_ids: Iterable[int]) -> None:
        ...


class SourceReader(ABC):
    """Retrieves the current raw entries published at a feed URL."""

    @abstractmethod
    def read(self, url: str) -> list[Any]:
        """Return the raw entries of the feed.

        Raises:
            InvalidSourceError: If the URL cannot be read as an RSS/Atom feed
        """
        ...
