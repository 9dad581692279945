"""Core refresh and aggregation engine.

External code should use the service facades:

    from feed_aggregator.core.services import ChannelService, FeedService

The engine classes are exported for callers that provide their own
registry, store or reader implementations.
"""

from feed_aggregator.core.aggregator import FeedAggregator
from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore, SourceReader
from feed_aggregator.core.mapper import EntryMapper
from feed_aggregator.core.merge import merge_entries
from feed_aggregator.core.reader import FeedDocument, FeedReader
from feed_aggregator.core.refresh import ChannelRefresher
from feed_aggregator.core.scheduler import AggregationScheduler, JobStatus, SchedulerStats
from feed_aggregator.core.ttl import is_refresh_needed

__all__ = [
    # Contracts
    "ChannelRegistry",
    "EntryStore",
    "SourceReader",
    # Engine
    "ChannelRefresher",
    "FeedAggregator",
    "merge_entries",
    "is_refresh_needed",
    # Components
    "EntryMapper",
    "FeedReader",
    "FeedDocument",
    "AggregationScheduler",
    # Result types
    "JobStatus",
    "SchedulerStats",
]
