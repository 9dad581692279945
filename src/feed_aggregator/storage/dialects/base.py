"""Abstract base dialect for database backends."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from sqlalchemy import Engine

if TYPE_CHECKING:
    from feed_aggregator.config import DatabaseConfig


class BaseDialect(ABC):
    """Abstract base class for database dialects.

    A dialect knows how to turn a :class:`DatabaseConfig` into an engine URL
    and ``create_engine`` keyword arguments for one backend.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Dialect name (e.g. "sqlite", "postgresql")."""
        ...

    @abstractmethod
    def build_url(self, config: "DatabaseConfig") -> str:
        """Build the SQLAlchemy database URL from configuration."""
        ...

    @abstractmethod
    def get_engine_kwargs(self, config: "DatabaseConfig") -> dict:
        """Keyword arguments for ``create_engine()``."""
        ...

    def setup_engine_events(self, engine: Engine) -> None:
        """Attach dialect-specific engine event listeners. No-op by default."""

    def validate_config(self, config: "DatabaseConfig") -> list[str]:
        """Return configuration problems for this dialect (empty if valid)."""
        return []
