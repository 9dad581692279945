"""Data models for the feed aggregator."""

from feed_aggregator.models.base import Base
from feed_aggregator.models.channel import Channel, ChannelCreate, ChannelModel, ChannelUpdate
from feed_aggregator.models.entry import EntryModel, FeedEntry

__all__ = [
    "Base",
    "Channel",
    "ChannelCreate",
    "ChannelModel",
    "ChannelUpdate",
    "EntryModel",
    "FeedEntry",
]
