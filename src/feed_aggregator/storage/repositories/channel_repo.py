"""
Channel repository for database operations.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from feed_aggregator.models import ChannelModel
from feed_aggregator.models.channel import ChannelCreate, ChannelUpdate
from feed_aggregator.storage.repositories.base import BaseRepository


class ChannelRepository(BaseRepository[ChannelModel, ChannelCreate, ChannelUpdate]):
    """Repository for Channel CRUD operations."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, ChannelModel)

    def get_by_url(self, url: str) -> Optional[ChannelModel]:
        """Get the first channel subscribed to ``url``, or None."""
        return self.session.query(ChannelModel).filter(ChannelModel.url == url).first()

    def exists(self, channel_id: int) -> bool:
        return (
            self.session.query(ChannelModel.id).filter(ChannelModel.id == channel_id).first()
            is not None
        )

    def update_refresh_time(self, channel_id: int, when: datetime) -> int:
        """Set ``last_refresh`` for a channel with a single UPDATE.

        Args:
            channel_id: Channel ID
            when: Refresh timestamp (naive UTC)

        Returns:
            Number of rows updated (0 if the channel does not exist)
        """
        count = (
            self.session.query(ChannelModel)
            .filter(ChannelModel.id == channel_id)
            .update({ChannelModel.last_refresh: when}, synchronize_session=False)
        )
        self.session.flush()
        return count
