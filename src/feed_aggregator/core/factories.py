"""
Factory functions for creating core components with configuration defaults.

Usage:
    from feed_aggregator.core.factories import create_aggregator, create_reader

    reader = create_reader(timeout_seconds=10)
    aggregator = create_aggregator(registry, store, reader)
"""

from typing import Callable, Optional

from feed_aggregator.config import get_config
from feed_aggregator.core.aggregator import FeedAggregator
from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore, SourceReader
from feed_aggregator.core.mapper import EntryMapper
from feed_aggregator.core.reader import FeedReader
from feed_aggregator.core.refresh import ChannelRefresher
from feed_aggregator.core.scheduler import AggregationScheduler
from feed_aggregator.models import FeedEntry


def create_reader(
    timeout_seconds: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> FeedReader:
    """Create a FeedReader configured from the fetcher settings.

    Args:
        timeout_seconds: Override default timeout
        max_retries: Override default retry count
    """
    config = get_config().fetcher
    return FeedReader(
        timeout_seconds=timeout_seconds or config.timeout_seconds,
        max_retries=config.max_retries if max_retries is None else max_retries,
    )


def create_mapper() -> EntryMapper:
    return EntryMapper()


def create_refresher(
    registry: ChannelRegistry,
    store: EntryStore,
    reader: SourceReader,
) -> ChannelRefresher:
    return ChannelRefresher(registry, store, reader, mapper=create_mapper())


def create_aggregator(
    registry: ChannelRegistry,
    store: EntryStore,
    reader: SourceReader,
    max_workers: Optional[int] = None,
) -> FeedAggregator:
    """Create a FeedAggregator.

    Args:
        max_workers: Override the aggregation pool size
    """
    return FeedAggregator(
        registry,
        store,
        reader,
        mapper=create_mapper(),
        max_workers=max_workers or get_config().aggregator.max_workers,
    )


def create_scheduler(
    aggregate: Callable[..., list[FeedEntry]],
    interval_minutes: Optional[int] = None,
) -> AggregationScheduler:
    """Create a scheduler that periodically runs ``aggregate``.

    Args:
        aggregate: Usually ``FeedAggregator.aggregate`` or ``FeedService.aggregate``
        interval_minutes: Override the configured interval
    """
    return AggregationScheduler(
        aggregate,
        interval_minutes=interval_minutes or get_config().scheduler.interval_minutes,
    )
