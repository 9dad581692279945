#!/usr/bin/env python3
"""
Create the channel and entry tables.

With ``--config`` the database settings come from a YAML file instead of the
environment.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy.exc import SQLAlchemyError

from feed_aggregator.config import get_config, load_config_from_yaml, set_config
from feed_aggregator.logger import get_logger, setup_logger
from feed_aggregator.storage.database import close_db, init_db

logger = get_logger("scripts.init_db")


def main() -> int:
    """Create (or recreate with ``--drop``) the schema."""
    import argparse

    parser = argparse.ArgumentParser(description="Create the feed-aggregator tables")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument(
        "--drop", action="store_true", help="Drop existing tables and their rows first"
    )
    args = parser.parse_args()

    if args.config:
        set_config(load_config_from_yaml(args.config))
    setup_logger()

    database = get_config().database
    logger.info(f"Creating tables on {database.type} database {database.database or database.path}")

    try:
        init_db(drop_all=args.drop)
    except SQLAlchemyError as e:
        logger.error(f"Schema creation failed: {e}")
        return 1
    finally:
        close_db()

    return 0


if __name__ == "__main__":
    sys.exit(main())
