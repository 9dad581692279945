"""Storage layer modules for the feed aggregator."""

from feed_aggregator.storage.database import (
    DatabaseManager,
    close_db,
    get_db,
    get_engine,
    get_session_factory,
    init_db,
)

__all__ = [
    "DatabaseManager",
    "get_db",
    "get_engine",
    "get_session_factory",
    "init_db",
    "close_db",
]
