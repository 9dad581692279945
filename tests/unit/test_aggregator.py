"""Unit tests for concurrent aggregation."""

import threading
from datetime import timedelta

import pytest
from conftest import (
    NOW,
    FakeReader,
    InMemoryChannelRegistry,
    InMemoryEntryStore,
    make_channel,
    make_entry,
    minutes_ago,
    raw,
)

from feed_aggregator.config import AggregatorConfig, Config, set_config
from feed_aggregator.core.aggregator import FeedAggregator
from feed_aggregator.exceptions import InvalidSourceError


def build(channels, entries=None, sources=None, hook=None, max_workers=4):
    registry = InMemoryChannelRegistry(channels)
    store = InMemoryEntryStore(entries)
    reader = FakeReader(sources, hook=hook)
    aggregator = FeedAggregator(registry, store, reader, max_workers=max_workers, clock=lambda: NOW)
    return aggregator, registry, store, reader


class TestFeedAggregator:
    """Tests for FeedAggregator.aggregate."""

    def test_no_channels(self):
        aggregator, _, store, reader = build([])

        assert aggregator.aggregate() == []
        assert reader.calls == []
        assert store.batches == []

    def test_nothing_eligible_returns_stored(self):
        channel = make_channel(1, ttl=3600, last_refresh=minutes_ago(5))
        aggregator, registry, store, reader = build(
            [channel],
            entries=[make_entry("https://a/1"), make_entry("https://a/1")],
        )

        result = aggregator.aggregate()

        assert [(e.link, e.fresh) for e in result] == [("https://a/1", False)]
        assert reader.calls == []
        assert registry.refreshed == []

    def test_new_entries_across_channels(self):
        first, second = make_channel(1), make_channel(2)
        aggregator, _, store, _ = build(
            [first, second],
            entries=[make_entry("https://old/1")],
            sources={
                first.url: [raw("https://a/1"), raw("https://a/2")],
                second.url: [raw("https://b/1"), raw("https://b/2"), raw("https://old/1")],
            },
        )

        result = aggregator.aggregate()

        assert len(result) == 5
        assert result[0].link == "https://old/1"
        assert result[0].fresh is False
        assert sorted(e.link for e in result if e.fresh) == [
            "https://a/1", "https://a/2", "https://b/1", "https://b/2",
        ]
        assert len(store.batches) == 1
        assert len(store.batches[0]) == 4

    def test_only_stale_channels_are_read(self):
        fresh = make_channel(1, ttl=3600, last_refresh=minutes_ago(30))
        stale = make_channel(2, ttl=3600, last_refresh=minutes_ago(90))
        aggregator, registry, _, reader = build(
            [fresh, stale],
            entries=[make_entry("https://a/1", channel_id=1)],
            sources={fresh.url: [raw("https://a/2")], stale.url: [raw("https://b/1")]},
        )

        result = aggregator.aggregate()

        assert reader.calls == [stale.url]
        assert [channel_id for channel_id, _ in registry.refreshed] == [2]
        assert [(e.link, e.fresh) for e in result] == [
            ("https://a/1", False),
            ("https://b/1", True),
        ]

    def test_force_refresh_reads_every_channel(self):
        channels = [make_channel(i, ttl=3600, last_refresh=minutes_ago(1)) for i in (1, 2, 3)]
        aggregator, registry, _, reader = build(channels)

        aggregator.aggregate(force_refresh=True)

        assert sorted(reader.calls) == sorted(c.url for c in channels)
        assert sorted(channel_id for channel_id, _ in registry.refreshed) == [1, 2, 3]

    def test_failure_aborts_without_persisting(self):
        good, bad = make_channel(1), make_channel(2)
        aggregator, registry, store, _ = build(
            [good, bad],
            entries=[make_entry("https://old/1")],
            sources={
                good.url: [raw("https://a/1")],
                bad.url: InvalidSourceError(bad.url, "Not an RSS/Atom document"),
            },
        )

        with pytest.raises(InvalidSourceError) as exc_info:
            aggregator.aggregate()

        assert exc_info.value.url == bad.url
        assert store.batches == []
        assert [e.link for e in store.entries] == ["https://old/1"]
        # Refresh time is recorded before the read, even for the failing channel
        assert (2, NOW) in registry.refreshed

    def test_first_failure_in_channel_order_is_raised(self):
        channels = [make_channel(1), make_channel(2), make_channel(3)]
        aggregator, _, _, _ = build(
            channels,
            sources={
                channels[1].url: InvalidSourceError(channels[1].url, "second"),
                channels[2].url: InvalidSourceError(channels[2].url, "third"),
            },
            max_workers=1,
        )

        with pytest.raises(InvalidSourceError) as exc_info:
            aggregator.aggregate()

        assert exc_info.value.reason == "second"

    def test_link_seen_on_other_channel_is_not_new(self):
        first, second = make_channel(1), make_channel(2)
        aggregator, _, store, _ = build(
            [first, second],
            entries=[make_entry("https://shared/1", channel_id=1)],
            sources={second.url: [raw("https://shared/1")]},
        )

        result = aggregator.aggregate()

        assert [(e.link, e.channel_id, e.fresh) for e in result] == [("https://shared/1", 1, False)]
        assert store.batches == []

    def test_channels_are_read_concurrently(self):
        """Both reads must be in flight at once for the barrier to release."""
        barrier = threading.Barrier(2, timeout=5)
        channels = [make_channel(1), make_channel(2)]
        aggregator, _, _, reader = build(
            channels,
            sources={channels[0].url: [raw("https://a/1")], channels[1].url: [raw("https://b/1")]},
            hook=lambda url: barrier.wait(),
            max_workers=2,
        )

        result = aggregator.aggregate()

        assert len(reader.calls) == 2
        assert {e.link for e in result} == {"https://a/1", "https://b/1"}

    def test_pool_size_defaults_to_config(self):
        set_config(Config(aggregator=AggregatorConfig(max_workers=3)))

        aggregator = FeedAggregator(InMemoryChannelRegistry(), InMemoryEntryStore(), FakeReader())

        assert aggregator.max_workers == 3

    def test_never_refreshed_zero_ttl_versus_recent_channel(self):
        a = make_channel(1, ttl=0)
        b = make_channel(2, ttl=3600, last_refresh=NOW - timedelta(seconds=10))
        aggregator, registry, _, reader = build(
            [a, b],
            sources={a.url: [raw("https://a/1")], b.url: [raw("https://b/1")]},
        )

        result = aggregator.aggregate()

        assert reader.calls == [a.url]
        assert registry.refreshed == [(1, NOW)]
        assert registry.get(2).last_refresh == b.last_refresh
        assert [e.link for e in result] == ["https://a/1"]
