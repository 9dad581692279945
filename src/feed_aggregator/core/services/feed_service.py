"""
Facade for refreshing and aggregating channel entries.
"""

from typing import TYPE_CHECKING, Optional

from feed_aggregator.core.interfaces import ChannelRegistry, EntryStore, SourceReader
from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedEntry

if TYPE_CHECKING:
    from feed_aggregator.storage.database import DatabaseManager


class FeedService:
    """Facade over the single-channel refresher and the concurrent aggregator.

    Collaborators default to the SQL registry/store on ``db_manager`` and an
    HTTP feed reader configured from the global config.
    """

    def __init__(
        self,
        registry: Optional[ChannelRegistry] = None,
        store: Optional[EntryStore] = None,
        reader: Optional[SourceReader] = None,
        db_manager: Optional["DatabaseManager"] = None,
        max_workers: Optional[int] = None,
    ):
        """Initialize feed service.

        Args:
            registry: Channel registry (defaults to SqlChannelRegistry)
            store: Entry store (defaults to SqlEntryStore)
            reader: Source reader (defaults to FeedReader)
            db_manager: DatabaseManager for the default registry and store
            max_workers: Aggregation pool size override
        """
        from feed_aggregator.core.factories import create_aggregator, create_reader, create_refresher

        if registry is None or store is None:
            from feed_aggregator.storage.registry import SqlChannelRegistry, SqlEntryStore

            registry = registry or SqlChannelRegistry(db_manager)
            store = store or SqlEntryStore(db_manager)

        reader = reader or create_reader()

        self._refresher = create_refresher(registry, store, reader)
        self._aggregator = create_aggregator(registry, store, reader, max_workers=max_workers)
        self._logger = get_logger(__name__)

    def fetch(self, channel_id: int, force_refresh: bool = False) -> list[FeedEntry]:
        """Get one channel's entries, refreshing it if its TTL expired.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            InvalidSourceError: If the channel's source cannot be read
        """
        return self._refresher.refresh(channel_id, force_refresh=force_refresh)

    def aggregate(self, force_refresh: bool = False) -> list[FeedEntry]:
        """Get all entries, refreshing every channel whose TTL expired.

        Raises:
            InvalidSourceError: If any refreshed channel's source cannot be read
        """
        return self._aggregator.aggregate(force_refresh=force_refresh)


def create_feed_service(
    db_manager: Optional["DatabaseManager"] = None,
    reader: Optional[SourceReader] = None,
) -> FeedService:
    """Create a FeedService backed by the SQL registry and store."""
    return FeedService(db_manager=db_manager, reader=reader)
