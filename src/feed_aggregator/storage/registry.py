"""
SQLAlchemy-backed implementations of the engine's registry and store contracts.

Each call opens its own session through the ``DatabaseManager`` so the
implementations can be used from aggregation worker threads.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore
from feed_aggregator.exceptions import ChannelNotFoundError
from feed_aggregator.logger import get_logger
from feed_aggregator.models import Channel, FeedEntry
from feed_aggregator.storage.database import DatabaseManager
from feed_aggregator.storage.repositories import ChannelRepository, EntryRepository

logger = get_logger(__name__)


class SqlChannelRegistry(ChannelRegistry):
    """Channel registry reading from the ``channels`` table."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or DatabaseManager()

    def get(self, channel_id: int) -> Channel:
        with self.db_manager.session() as session:
            model = ChannelRepository(session).get_by_id(channel_id)
            if model is None:
                raise ChannelNotFoundError(channel_id)
            return Channel.model_validate(model)

    def list(self) -> list[Channel]:
        with self.db_manager.session() as session:
            return [Channel.model_validate(model) for model in ChannelRepository(session).list()]

    def set_last_refresh(self, channel_id: int, when: datetime) -> None:
        with self.db_manager.session() as session:
            ChannelRepository(session).update_refresh_time(channel_id, when)

        logger.info(f"Refreshing channel last update time. Channel id: {channel_id}")


class SqlEntryStore(EntryStore):
    """Entry store backed by the ``entries`` table."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or DatabaseManager()

    def find_by_channels(self, channel_ids: Iterable[int]) -> list[FeedEntry]:
        with self.db_manager.session() as session:
            models = EntryRepository(session).list_by_channels(channel_ids)
            return [FeedEntry.from_model(model) for model in models]

    def find_all(self) -> list[FeedEntry]:
        with self.db_manager.session() as session:
            return [FeedEntry.from_model(model) for model in EntryRepository(session).list_all()]

    def save_all(self, entries: Iterable[FeedEntry]) -> None:
        """Insert entries in one transaction.

        Entries whose ``(channel_id, link)`` is already stored are skipped,
        which keeps overlapping aggregations from writing the same item twice.
        Stored ids are written back to the given ``FeedEntry`` objects.
        """
        entries = list(entries)
        if not entries:
            return

        with self.db_manager.session() as session:
            repo = EntryRepository(session)
            seen = repo.existing_links({entry.channel_id for entry in entries})

            pending: list[tuple[FeedEntry, object]] = []
            for entry in entries:
                key = (entry.channel_id, entry.link)
                if key in seen:
                    continue
                seen.add(key)
                pending.append((entry, entry.to_model()))

            repo.add_all([model for _, model in pending])

            for entry, model in pending:
                entry.id = model.id

        skipped = len(entries) - len(pending)
        logger.debug(f"Stored {len(pending)} entries ({skipped} already present)")

    def delete_by_channels(self, channel_ids: Iterable[int]) -> None:
        with self.db_manager.session() as session:
            count = EntryRepository(session).delete_by_channels(channel_ids)

        logger.info(f"Deleted {count} entries")
