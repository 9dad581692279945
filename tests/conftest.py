"""Shared fixtures and in-memory collaborators for the engine tests."""

import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

import pytest

from feed_aggregator.config import set_config
from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore, SourceReader
from feed_aggregator.exceptions import ChannelNotFoundError
from feed_aggregator.models import Channel, FeedEntry
from feed_aggregator.storage.database import DatabaseManager

NOW = datetime(2024, 1, 1, 12, 0, 0)


class InMemoryChannelRegistry(ChannelRegistry):
    """Registry holding channels in a dict and recording refresh-time writes."""

    def __init__(self, channels: Optional[list[Channel]] = None):
        self.channels: dict[int, Channel] = {channel.id: channel for channel in channels or []}
        self.refreshed: list[tuple[int, datetime]] = []
        self._lock = threading.Lock()

    def get(self, channel_id: int) -> Channel:
        if channel_id not in self.channels:
            raise ChannelNotFoundError(channel_id)
        return self.channels[channel_id]

    def list(self) -> list[Channel]:
        return list(self.channels.values())

    def set_last_refresh(self, channel_id: int, when: datetime) -> None:
        with self._lock:
            self.refreshed.append((channel_id, when))
            channel = self.channels[channel_id]
            self.channels[channel_id] = channel.model_copy(update={"last_refresh": when})


class InMemoryEntryStore(EntryStore):
    """Store keeping copies of saved entries and recording every batch."""

    def __init__(self, entries: Optional[list[FeedEntry]] = None):
        self.entries: list[FeedEntry] = []
        self.batches: list[list[FeedEntry]] = []
        self._next_id = 1
        for entry in entries or []:
            self._insert(entry)

    def _insert(self, entry: FeedEntry) -> None:
        entry.id = self._next_id
        self._next_id += 1
        self.entries.append(replace(entry, fresh=False))

    def find_by_channels(self, channel_ids) -> list[FeedEntry]:
        ids = set(channel_ids)
        return [replace(entry) for entry in self.entries if entry.channel_id in ids]

    def find_all(self) -> list[FeedEntry]:
        return [replace(entry) for entry in self.entries]

    def save_all(self, entries) -> None:
        entries = list(entries)
        self.batches.append(entries)
        for entry in entries:
            self._insert(entry)

    def delete_by_channels(self, channel_ids) -> None:
        ids = set(channel_ids)
        self.entries = [entry for entry in self.entries if entry.channel_id not in ids]


class FakeReader(SourceReader):
    """Reader serving canned raw entries per URL.

    A URL mapped to an exception raises it. ``hook`` runs before every read.
    """

    def __init__(
        self,
        sources: Optional[dict[str, Union[list[dict], Exception]]] = None,
        hook: Optional[Callable[[str], None]] = None,
    ):
        self.sources = sources or {}
        self.calls: list[str] = []
        self.hook = hook
        self._lock = threading.Lock()

    def read(self, url: str) -> list[Any]:
        with self._lock:
            self.calls.append(url)
        if self.hook is not None:
            self.hook(url)

        source = self.sources.get(url, [])
        if isinstance(source, Exception):
            raise source
        return list(source)


def make_channel(
    channel_id: int,
    ttl: Optional[int] = None,
    last_refresh: Optional[datetime] = None,
    name: Optional[str] = None,
) -> Channel:
    return Channel(
        id=channel_id,
        url=f"https://example.com/{channel_id}/rss",
        name=name or f"Channel {channel_id}",
        ttl=ttl,
        last_refresh=last_refresh,
    )


def make_entry(link: str, channel_id: int = 1, title: Optional[str] = None) -> FeedEntry:
    return FeedEntry(link=link, channel_id=channel_id, title=title or link)


def raw(link: str, title: Optional[str] = None) -> dict:
    return {"link": link, "title": title or link}


def minutes_ago(minutes: int) -> datetime:
    return NOW - timedelta(minutes=minutes)


@pytest.fixture(autouse=True)
def reset_config():
    """Drop any configuration installed by a test."""
    yield
    set_config(None)


@pytest.fixture
def db_manager():
    """In-memory database shared by every session of the manager."""
    manager = DatabaseManager(":memory:")
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture
def file_db_manager(tmp_path):
    """File-backed database for tests that use several threads."""
    manager = DatabaseManager(str(tmp_path / "aggregator.db"))
    manager.init_db()
    yield manager
    manager.close()
