"""
Facade services for core modules.

External code (scripts, schedulers, embedding applications) should interact
with these services rather than wiring the engine classes by hand.

Example:
    from feed_aggregator.core.services import ChannelService, FeedService

    channels = ChannelService()
    channel = channels.create(ChannelCreate(url="https://example.com/rss"))

    feeds = FeedService()
    entries = feeds.aggregate()
    new_entries = [entry for entry in entries if entry.fresh]
"""

from feed_aggregator.core.services.channel_service import ChannelService, create_channel_service
from feed_aggregator.core.services.feed_service import FeedService, create_feed_service
from feed_aggregator.core.services.scheduler_service import (
    SchedulerService,
    create_scheduler_service,
)

__all__ = [
    # Services
    "ChannelService",
    "FeedService",
    "SchedulerService",
    # Factory functions
    "create_channel_service",
    "create_feed_service",
    "create_scheduler_service",
]
