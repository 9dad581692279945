"""
Single-channel refresh operation.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Optional

from feed_aggregator.core.identity import unique_entries
from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore, SourceReader
from feed_aggregator.core.mapper import EntryMapper
from feed_aggregator.core.merge import merge_entries
from feed_aggregator.core.ttl import is_refresh_needed
from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedEntry
from feed_aggregator.utils.time_utils import utcnow

logger = get_logger(__name__)


class ChannelRefresher:
    """Refreshes one channel synchronously.

    Unlike aggregation, the refresh time is recorded only after the source
    was read successfully, so a failed read leaves the channel untouched and
    the next call retries it.
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        store: EntryStore,
        reader: SourceReader,
        mapper: Optional[EntryMapper] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.registry = registry
        self.store = store
        self.reader = reader
        self.mapper = mapper or EntryMapper()
        self._clock = clock

    def refresh(self, channel_id: int, force_refresh: bool = False) -> list[FeedEntry]:
        """Return the channel's entries, reading its source first if needed.

        Args:
            channel_id: Channel to refresh
            force_refresh: Read the source even if the TTL has not expired

        Returns:
            Stored entries plus newly retrieved ones (flagged fresh), unique by link

        Raises:
            ChannelNotFoundError: If the channel does not exist
            InvalidSourceError: If the channel's source cannot be read
        """
        channel = self.registry.get(channel_id)
        entries = self.store.find_by_channels([channel.id])

        logger.info(
            f"Retrieved {len(entries)} existing entries for channel "
            f"[{channel.name}, id: {channel.id}]"
        )

        if not (force_refresh or is_refresh_needed(channel.ttl, channel.last_refresh, self._clock())):
            return unique_entries(entries)

        raw_entries = self.reader.read(channel.url)
        retrieved = self.mapper.map_entries(raw_entries, channel.id)

        logger.info(
            f"Fetching channel {channel.id}. Force refresh set to {force_refresh}. "
            f"{len(retrieved)} entries fetched"
        )

        self.registry.set_last_refresh(channel.id, self._clock())

        return merge_entries(self.store, entries, retrieved)
