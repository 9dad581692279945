"""
Logging for the feed aggregator.

Modules log through ``get_logger(__name__)``; the bound name is rendered by
the ``{extra[name]}`` field of the configured format. Records logged on the
bare logger are attributed to ``ROOT_NAME``.
"""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger as _logger

from feed_aggregator.config import LoggingConfig, get_config

ROOT_NAME = "feed_aggregator"


def _sink_options(level: str, format: str) -> dict[str, Any]:
    return {"level": level, "format": format, "backtrace": True, "diagnose": False}


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: Optional[str] = None,
    retention: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """Replace every loguru sink with the ones enabled in ``LoggingConfig``.

    Arguments override the matching config fields.
    """
    settings: LoggingConfig = get_config().logging
    options = _sink_options(level or settings.level, format or settings.format)

    _logger.remove()
    _logger.configure(extra={"name": ROOT_NAME})

    if settings.console_enabled:
        _logger.add(sys.stderr, colorize=True, **options)

    if settings.file_enabled:
        path = Path(log_file or settings.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        # enqueue: aggregation logs from worker threads
        _logger.add(
            path,
            rotation=rotation or settings.rotation,
            retention=retention or settings.retention,
            compression="zip",
            encoding="utf-8",
            enqueue=True,
            **options,
        )


def get_logger(name: Optional[str] = None):
    """Return the loguru logger, bound to ``name`` when one is given."""
    if name:
        return _logger.bind(name=name)
    return _logger


logger = _logger

__all__ = [
    "ROOT_NAME",
    "setup_logger",
    "get_logger",
    "logger",
]
