"""
Database connection and session management.
"""

import threading
from contextlib import contextmanager, nullcontext
from typing import TYPE_CHECKING, Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from feed_aggregator.config import get_config
from feed_aggregator.logger import get_logger
from feed_aggregator.models import Base
from feed_aggregator.storage.dialects import get_dialect

if TYPE_CHECKING:
    from feed_aggregator.config import DatabaseConfig

logger = get_logger(__name__)

# Global engine and session factory
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
_shared_connection_lock = threading.RLock()


def _create_engine(db_config: "DatabaseConfig") -> Engine:
    """Create an engine for the configured backend through its dialect."""
    dialect = get_dialect(db_config.type)

    problems = dialect.validate_config(db_config)
    if problems:
        raise ValueError(f"Invalid {dialect.name} configuration: {'; '.join(problems)}")

    engine = create_engine(dialect.build_url(db_config), **dialect.get_engine_kwargs(db_config))
    dialect.setup_engine_events(engine)
    return engine


def get_engine() -> Engine:
    """Get or create the global database engine."""
    global _engine

    if _engine is None:
        _engine = _create_engine(get_config().database)

    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the global session factory."""
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

    return _session_factory


@contextmanager
def _session_scope(factory: sessionmaker, engine: Engine, lock: threading.RLock) -> Generator[Session, None, None]:
    """Open a session that commits on success and rolls back on error.

    Engines on a ``StaticPool`` hand every session the same DBAPI connection,
    so their sessions are serialized with ``lock``.
    """
    guard = lock if isinstance(engine.pool, StaticPool) else nullcontext()

    with guard:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """Get a database session that commits on success and rolls back on error.

    Example:
        >>> with get_db() as session:
        ...     channels = session.query(ChannelModel).all()
    """
    with _session_scope(get_session_factory(), get_engine(), _shared_connection_lock) as session:
        yield session


def init_db(drop_all: bool = False) -> None:
    """Create all tables on the global engine.

    Args:
        drop_all: If True, drop all tables before creating them (DANGEROUS!)
    """
    engine = get_engine()

    if drop_all:
        logger.warning("Dropping all tables - data will be lost!")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


def close_db() -> None:
    """Dispose of the global engine and session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None

    _session_factory = None


class DatabaseManager:
    """Database manager owning one engine and handing out sessions.

    Every call to :meth:`session` opens a fresh session, so a manager can be
    shared by threads as long as each thread uses its own session. On a
    ``:memory:`` SQLite database all sessions share one connection and are
    serialized, so concurrent aggregation works but does not write in parallel.
    """

    def __init__(self, db_path: Optional[str] = None, db_config: Optional["DatabaseConfig"] = None):
        """Initialize database manager.

        Args:
            db_path: Optional SQLite database path (``":memory:"`` allowed).
            db_config: Optional database configuration.

        Note:
            If neither is provided, the global engine is used.
        """
        self._db_path = db_path
        self._db_config = db_config
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._lock = threading.RLock()

    @property
    def engine(self) -> Engine:
        """Get the database engine."""
        if self._engine is None:
            if self._db_path:
                from feed_aggregator.config import DatabaseConfig

                self._engine = _create_engine(DatabaseConfig(type="sqlite", path=self._db_path))
            elif self._db_config:
                self._engine = _create_engine(self._db_config)
            else:
                self._engine = get_engine()
                self._lock = _shared_connection_lock

        return self._engine

    def init_db(self, drop_all: bool = False) -> None:
        """Initialize database tables.

        Args:
            drop_all: If True, drop existing tables first
        """
        if drop_all:
            Base.metadata.drop_all(bind=self.engine)

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Get a database session.

        Yields:
            SQLAlchemy Session instance
        """
        if self._session_factory is None:
            self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        with _session_scope(self._session_factory, self.engine, self._lock) as session:
            yield session

    def close(self) -> None:
        """Close database connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._session_factory = None

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
