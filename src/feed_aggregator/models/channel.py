"""
Channel data model for subscribed RSS/Atom sources.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from feed_aggregator.models.base import Base
from feed_aggregator.utils.time_utils import utcnow


class ChannelModel(Base):
    """SQLAlchemy ORM model for Channel."""

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)

    # Freshness window in seconds; NULL means the channel is always refreshed
    ttl: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    last_refresh: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<ChannelModel(id={self.id}, url='{self.url}', ttl={self.ttl})>"


# Pydantic models


class ChannelCreate(BaseModel):
    """Schema for subscribing to a new channel."""

    url: str = Field(..., max_length=2048, description="Feed URL")
    name: Optional[str] = Field(None, max_length=255, description="Channel name (defaults to feed title)")
    ttl: Optional[int] = Field(None, ge=0, description="Freshness window in seconds")


class ChannelUpdate(BaseModel):
    """Schema for updating a channel. The URL cannot be changed."""

    name: Optional[str] = Field(None, max_length=255)
    ttl: Optional[int] = Field(None, ge=0)


class Channel(BaseModel):
    """Read-only snapshot of a channel, safe to pass between threads."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    url: str
    name: Optional[str] = None
    ttl: Optional[int] = None
    last_refresh: Optional[datetime] = None
