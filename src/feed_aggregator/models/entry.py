"""
Entry data model for retrieved feed items.

``EntryModel`` is the stored row. ``FeedEntry`` is the in-memory object the
engine works with; its ``fresh`` flag is never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from feed_aggregator.models.base import Base
from feed_aggregator.utils.time_utils import utcnow


class EntryModel(Base):
    """SQLAlchemy ORM model for Entry."""

    __tablename__ = "entries"

    __table_args__ = (
        Index("ix_entries_channel_link", "channel_id", "link"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # No foreign key: entries are removed explicitly by channel id
    channel_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    link: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    publication_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    contents: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    authors: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<EntryModel(id={self.id}, channel_id={self.channel_id}, link='{self.link}')>"


@dataclass(eq=False)
class FeedEntry:
    """A retrieved feed item.

    Identity for deduplication is the ``link`` alone, see
    :func:`feed_aggregator.core.identity.entry_key`. ``id`` is the storage
    key and is ``None`` until the entry has been persisted.
    """

    link: str
    channel_id: int
    title: Optional[str] = None
    publication_date: Optional[datetime] = None
    contents: list[dict] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    id: Optional[int] = None
    fresh: bool = False

    @classmethod
    def from_model(cls, model: EntryModel) -> "FeedEntry":
        return cls(
            id=model.id,
            channel_id=model.channel_id,
            link=model.link,
            title=model.title,
            publication_date=model.publication_date,
            contents=list(model.contents or []),
            authors=list(model.authors or []),
        )

    def to_model(self) -> EntryModel:
        return EntryModel(
            channel_id=self.channel_id,
            link=self.link,
            title=self.title,
            publication_date=self.publication_date,
            contents=list(self.contents),
            authors=list(self.authors),
        )
