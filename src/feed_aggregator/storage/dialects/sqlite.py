"""SQLite dialect implementation."""

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import Engine, event
from sqlalchemy.pool import QueuePool, StaticPool

from feed_aggregator.storage.dialects.base import BaseDialect

if TYPE_CHECKING:
    from feed_aggregator.config import DatabaseConfig

MEMORY_PATH = ":memory:"


class SQLiteDialect(BaseDialect):
    """SQLite database dialect, the default backend.

    File databases use a QueuePool so aggregation worker threads each get
    their own connection. ``:memory:`` databases use a StaticPool so every
    session sees the same database.
    """

    @property
    def name(self) -> str:
        return "sqlite"

    def build_url(self, config: "DatabaseConfig") -> str:
        """Build SQLite database URL.

        ``data/app.db`` becomes ``sqlite:///data/app.db``; values that are
        already ``sqlite://`` URLs are returned unchanged.
        """
        db_path = config.path

        if db_path.startswith("sqlite://"):
            return db_path

        if db_path != MEMORY_PATH:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        return f"sqlite:///{db_path}"

    def get_engine_kwargs(self, config: "DatabaseConfig") -> dict:
        kwargs = {
            "echo": config.echo,
            "connect_args": {
                "check_same_thread": False,
                "timeout": 30,
            },
        }

        if config.path in (MEMORY_PATH, f"sqlite:///{MEMORY_PATH}"):
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = QueuePool
            kwargs["pool_size"] = config.pool_size
            kwargs["max_overflow"] = config.max_overflow

        return kwargs

    def setup_engine_events(self, engine: Engine) -> None:
        """Enable WAL journaling for concurrent readers."""

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    def validate_config(self, config: "DatabaseConfig") -> list[str]:
        errors = []
        db_path = Path(config.path)
        if config.path != MEMORY_PATH and db_path.exists() and not db_path.is_file():
            errors.append(f"Database path exists but is not a file: {config.path}")
        return errors
