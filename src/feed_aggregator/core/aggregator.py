"""
Concurrent aggregation over every channel whose TTL has expired.
"""

from collections.abc import Callable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Optional

from feed_aggregator.config import get_config
from feed_aggregator.core.identity import unique_entries
from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore, SourceReader
from feed_aggregator.core.mapper import EntryMapper
from feed_aggregator.core.merge import merge_entries
from feed_aggregator.core.ttl import is_refresh_needed
from feed_aggregator.logger import get_logger
from feed_aggregator.models import Channel, FeedEntry
from feed_aggregator.utils.time_utils import utcnow

logger = get_logger(__name__)


class FeedAggregator:
    """Fans out retrieval of all eligible channels and merges the results.

    Each task records the channel's refresh time before reading the source,
    so slow feeds do not hold back refresh-time writes. A failed read
    therefore still counts as a refresh for that channel.

    The join is all-or-nothing: if any channel fails, the aggregation raises
    that error and nothing is merged or persisted.
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        store: EntryStore,
        reader: SourceReader,
        mapper: Optional[EntryMapper] = None,
        max_workers: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.registry = registry
        self.store = store
        self.reader = reader
        self.mapper = mapper or EntryMapper()
        self.max_workers = max_workers or get_config().aggregator.max_workers
        self._clock = clock

    def aggregate(self, force_refresh: bool = False) -> list[FeedEntry]:
        """Refresh every eligible channel and return all entries.

        Args:
            force_refresh: Refresh every channel regardless of its TTL

        Returns:
            All stored entries plus newly retrieved ones (flagged fresh), unique by link

        Raises:
            InvalidSourceError: If any eligible channel's source cannot be read
        """
        baseline = self.store.find_all()

        now = self._clock()
        channels = [
            channel
            for channel in self.registry.list()
            if force_refresh or is_refresh_needed(channel.ttl, channel.last_refresh, now)
        ]

        logger.info(f"Aggregating {len(channels)} channels. Force refresh set to {force_refresh}")

        if not channels:
            return unique_entries(baseline)

        retrieved = self._retrieve_all(channels)
        return merge_entries(self.store, baseline, retrieved)

    def _retrieve(self, channel: Channel) -> list[FeedEntry]:
        self.registry.set_last_refresh(channel.id, self._clock())
        raw_entries = self.reader.read(channel.url)
        return self.mapper.map_entries(raw_entries, channel.id)

    def _retrieve_all(self, channels: list[Channel]) -> list[FeedEntry]:
        """Run one task per channel and join them.

        On the first failure, tasks that have not started are cancelled and
        running ones are waited for; the first failure in channel order is
        then raised.
        """
        workers = min(self.max_workers, len(channels))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aggregator") as executor:
            futures: list[Future] = [executor.submit(self._retrieve, channel) for channel in channels]

            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            if pending:
                for future in pending:
                    future.cancel()
                wait(pending)

        retrieved: list[FeedEntry] = []
        first_error: Optional[BaseException] = None

        for channel, future in zip(channels, futures):
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                logger.error(f"Failed to retrieve channel {channel.id} ({channel.url}): {error}")
                first_error = first_error or error
                continue
            retrieved.extend(future.result())

        if first_error is not None:
            raise first_error

        return retrieved
