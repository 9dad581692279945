"""
Configuration management for the feed aggregator.

Uses Pydantic for validation and pydantic-settings for environment variable support.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration.

    SQLite is the default backend; PostgreSQL is selected with ``DB_TYPE``.

    For SQLite only ``path`` is used (``DB_PATH``).
    For PostgreSQL set ``host``, ``database``, ``user`` and ``password``
    (``DB_HOST``, ``DB_DATABASE``, ``DB_USER``, ``DB_PASSWORD``).
    """

    model_config = SettingsConfigDict(env_prefix="DB_")

    type: str = Field(default="sqlite", description="Database type: sqlite, postgresql")

    # SQLite
    path: str = Field(default="data/feed_aggregator.db", description="Database file path (SQLite)")

    # PostgreSQL
    host: str | None = Field(default=None, description="Database host")
    port: int | None = Field(default=None, description="Database port (default: 5432)")
    database: str | None = Field(default=None, description="Database name")
    user: str | None = Field(default=None, description="Database user")
    password: str | None = Field(default=None, description="Database password")

    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_size: int = Field(default=5, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=10, ge=0, description="Max overflow connections")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Normalize and validate the database type."""
        v = v.lower().strip()
        if v == "postgres":
            v = "postgresql"
        valid_types = ["sqlite", "postgresql"]
        if v not in valid_types:
            raise ValueError(f"Invalid database type: {v!r}. Must be one of {valid_types}")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int | None) -> int | None:
        if v is not None and not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v


class FetcherConfig(BaseSettings):
    """Source reader (HTTP + feedparser) configuration."""

    model_config = SettingsConfigDict(env_prefix="FETCHER_")

    timeout_seconds: int = Field(default=30, ge=1, le=300, description="Request timeout")
    user_agent: str = Field(
        default="Feed-Aggregator/0.1.0 (+https://github.com/feed-aggregator)",
        description="User-Agent header",
    )

    # Transient network errors only; invalid feeds are never retried
    max_retries: int = Field(default=2, ge=0, le=10)
    retry_delay_seconds: float = Field(default=1.0, ge=0)

    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=5, ge=0, le=20)


class AggregatorConfig(BaseSettings):
    """Refresh and aggregation engine configuration."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_")

    max_workers: int = Field(
        default=8, ge=1, le=64,
        description="Maximum channels retrieved concurrently during aggregation",
    )
    default_ttl_seconds: Optional[int] = Field(
        default=3600, ge=0,
        description="TTL assigned to new channels that do not declare one (None=always refresh)",
    )


class SchedulerConfig(BaseSettings):
    """Periodic aggregation job configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    enabled: bool = Field(default=False, description="Run aggregation periodically")
    timezone: str = Field(default="UTC", description="Scheduler timezone")
    interval_minutes: int = Field(default=15, ge=1, description="Aggregation interval")
    misfire_grace_time: int = Field(default=300, ge=0, description="Misfire grace time in seconds")
    coalesce: bool = Field(default=True, description="Coalesce misfired runs")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        description="Log format",
    )

    file_enabled: bool = Field(default=True, description="Enable file logging")
    file_path: str = Field(default="logs/feed_aggregator.log", description="Log file path")
    rotation: str = Field(default="50 MB", description="Log rotation size")
    retention: str = Field(default="14 days", description="Log retention period")

    console_enabled: bool = Field(default=True, description="Enable console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FEEDAGG_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Feed Aggregator", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    aggregator: AggregatorConfig = Field(default_factory=AggregatorConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


_NESTED_CONFIGS = {
    "database": DatabaseConfig,
    "fetcher": FetcherConfig,
    "aggregator": AggregatorConfig,
    "scheduler": SchedulerConfig,
    "logging": LoggingConfig,
}

# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration (None resets to lazy defaults)."""
    global _config
    _config = config


def load_config_from_yaml(yaml_path: str) -> Config:
    """Load configuration from a YAML file.

    Top-level keys matching a section name (``database``, ``fetcher``,
    ``aggregator``, ``scheduler``, ``logging``) are built into that section;
    anything else is passed to :class:`Config` directly.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Config instance loaded from the file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    import yaml

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    with yaml_file.open("r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    main_config = {}
    for key, value in config_dict.items():
        if key in _NESTED_CONFIGS:
            main_config[key] = _NESTED_CONFIGS[key](**(value or {}))
        else:
            main_config[key] = value

    return Config(**main_config)


def reload_config(yaml_path: str = "config/config.yaml") -> Config:
    """Reload configuration from the YAML file if present, else from the environment."""
    global _config

    if Path(yaml_path).exists():
        _config = load_config_from_yaml(yaml_path)
    else:
        _config = Config()

    return _config
