"""
Facade for channel subscription management.
"""

from typing import TYPE_CHECKING, Optional

from feed_aggregator.config import get_config
from feed_aggregator.exceptions import ChannelNotFoundError
from feed_aggregator.logger import get_logger
from feed_aggregator.models import Channel, ChannelCreate, ChannelUpdate
from feed_aggregator.utils.time_utils import utcnow

if TYPE_CHECKING:
    from feed_aggregator.core.reader import FeedReader
    from feed_aggregator.storage.database import DatabaseManager


class ChannelService:
    """Facade for listing, creating, updating and deleting channels."""

    def __init__(
        self,
        db_manager: Optional["DatabaseManager"] = None,
        reader: Optional["FeedReader"] = None,
    ):
        """Initialize channel service.

        Args:
            db_manager: DatabaseManager (defaults to the global engine)
            reader: Feed reader used to validate new channel URLs
        """
        from feed_aggregator.core.factories import create_reader
        from feed_aggregator.storage.database import DatabaseManager

        self._db_manager = db_manager or DatabaseManager()
        self._reader = reader or create_reader()
        self._logger = get_logger(__name__)

    def list(self) -> list[Channel]:
        from feed_aggregator.storage.repositories import ChannelRepository

        with self._db_manager.session() as session:
            return [Channel.model_validate(model) for model in ChannelRepository(session).list()]

    def get(self, channel_id: int) -> Channel:
        """Get a channel.

        Raises:
            ChannelNotFoundError: If the channel does not exist
        """
        from feed_aggregator.storage.repositories import ChannelRepository

        with self._db_manager.session() as session:
            model = ChannelRepository(session).get_by_id(channel_id)
            if model is None:
                raise ChannelNotFoundError(channel_id)
            return Channel.model_validate(model)

    def create(self, data: ChannelCreate) -> Channel:
        """Subscribe to a channel.

        The URL is read once to prove it is a feed; its title becomes the
        channel name when none is given.

        Raises:
            InvalidSourceError: If the URL is not a readable RSS/Atom feed
        """
        from feed_aggregator.storage.repositories import ChannelRepository

        feed = self._reader.read_feed(data.url)

        values = data.model_dump()
        if not (data.name or "").strip():
            values["name"] = feed.title
            self._logger.info(f"Channel name not set. Using feed title: {feed.title}")
        if "ttl" not in data.model_fields_set:
            values["ttl"] = get_config().aggregator.default_ttl_seconds

        with self._db_manager.session() as session:
            model = ChannelRepository(session).create(ChannelCreate(**values))
            self._logger.info(f"Created channel {model.id} for {model.url}")
            return Channel.model_validate(model)

    def update(self, channel_id: int, data: ChannelUpdate) -> Channel:
        """Update a channel's name and TTL. The URL cannot be modified.

        A blank name is ignored; an explicit ``ttl=None`` clears the TTL.

        Raises:
            ChannelNotFoundError: If the channel does not exist
        """
        from feed_aggregator.storage.repositories import ChannelRepository

        changes = data.model_dump(exclude_unset=True)
        if not (changes.get("name") or "").strip():
            changes.pop("name", None)

        with self._db_manager.session() as session:
            repo = ChannelRepository(session)
            model = repo.get_by_id(channel_id)
            if model is None:
                raise ChannelNotFoundError(channel_id)

            model = repo.update(model, ChannelUpdate(**changes))
            self._logger.info(f"Updated channel {channel_id}: {changes}")
            return Channel.model_validate(model)

    def delete(self, channel_id: int) -> None:
        """Delete a channel together with its stored entries.

        Raises:
            ChannelNotFoundError: If the channel does not exist
        """
        from feed_aggregator.storage.repositories import ChannelRepository, EntryRepository

        with self._db_manager.session() as session:
            repo = ChannelRepository(session)
            model = repo.get_by_id(channel_id)
            if model is None:
                raise ChannelNotFoundError(channel_id)

            repo.delete(model)
            removed = EntryRepository(session).delete_by_channels([channel_id])

        self._logger.info(f"Deleted channel {channel_id} and {removed} entries")

    def update_refresh_time(self, channel_id: int) -> None:
        from feed_aggregator.storage.repositories import ChannelRepository

        with self._db_manager.session() as session:
            ChannelRepository(session).update_refresh_time(channel_id, utcnow())

        self._logger.info(f"Refreshing channel last update time. Channel id: {channel_id}")


def create_channel_service(
    db_manager: Optional["DatabaseManager"] = None,
    reader: Optional["FeedReader"] = None,
) -> ChannelService:
    return ChannelService(db_manager=db_manager, reader=reader)
