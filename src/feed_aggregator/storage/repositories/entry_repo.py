"""
Entry repository for database operations.
"""

from collections.abc import Iterable

from sqlalchemy import asc
from sqlalchemy.orm import Session

from feed_aggregator.models import EntryModel


class EntryRepository:
    """Repository for stored feed entries.

    Entries are written in batches and never updated, so this repository
    does not share the schema-driven CRUD of ``BaseRepository``.
    """

    def __init__(self, session: Session) -> None:
        """Initialize repository with a database session.

        Args:
            session: SQLAlchemy Session instance
        """
        self.session = session

    def list_by_channels(self, channel_ids: Iterable[int]) -> list[EntryModel]:
        """Get all entries belonging to any of the given channels."""
        ids = list(channel_ids)
        if not ids:
            return []
        return (
            self.session.query(EntryModel)
            .filter(EntryModel.channel_id.in_(ids))
            .order_by(asc(EntryModel.id))
            .all()
        )

    def list_all(self) -> list[EntryModel]:
        return self.session.query(EntryModel).order_by(asc(EntryModel.id)).all()

    def existing_links(self, channel_ids: Iterable[int]) -> set[tuple[int, str]]:
        """Return the ``(channel_id, link)`` pairs already stored for the channels."""
        ids = list(channel_ids)
        if not ids:
            return set()
        rows = (
            self.session.query(EntryModel.channel_id, EntryModel.link)
            .filter(EntryModel.channel_id.in_(ids))
            .all()
        )
        return {(channel_id, link) for channel_id, link in rows}

    def add_all(self, entries: list[EntryModel]) -> list[EntryModel]:
        """Insert entries in one flush and return them with ids assigned."""
        if not entries:
            return []
        self.session.add_all(entries)
        self.session.flush()
        return entries

    def delete_by_channels(self, channel_ids: Iterable[int]) -> int:
        """Delete all entries of the given channels.

        Returns:
            Number of entries deleted
        """
        ids = list(channel_ids)
        if not ids:
            return 0
        count = (
            self.session.query(EntryModel)
            .filter(EntryModel.channel_id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return count

    def count(self, channel_id: int | None = None) -> int:
        query = self.session.query(EntryModel)
        if channel_id is not None:
            query = query.filter(EntryModel.channel_id == channel_id)
        return query.count()
