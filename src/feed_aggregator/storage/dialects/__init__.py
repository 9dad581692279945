"""Database dialect system.

Maps the configured database type to the dialect that builds its engine.
"""

from feed_aggregator.storage.dialects.base import BaseDialect
from feed_aggregator.storage.dialects.postgresql import PostgreSQLDialect
from feed_aggregator.storage.dialects.sqlite import SQLiteDialect

_DIALECT_REGISTRY: dict[str, type[BaseDialect]] = {
    "sqlite": SQLiteDialect,
    "postgresql": PostgreSQLDialect,
    "postgres": PostgreSQLDialect,
}


def get_dialect(name: str) -> BaseDialect:
    """Get a dialect instance by name.

    Raises:
        ValueError: If dialect name is not supported
    """
    name_lower = name.lower()
    if name_lower not in _DIALECT_REGISTRY:
        supported = ", ".join(get_supported_dialects())
        raise ValueError(
            f"Unsupported database dialect: {name!r}. Supported dialects: {supported}"
        )
    return _DIALECT_REGISTRY[name_lower]()


def get_supported_dialects() -> list[str]:
    return sorted(_DIALECT_REGISTRY.keys())


__all__ = [
    "BaseDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "get_supported_dialects",
]
