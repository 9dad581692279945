#!/usr/bin/env python3
"""
Seed the database with sample channels.

Channels are inserted directly, without reading their sources.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from feed_aggregator.models import ChannelModel
from feed_aggregator.storage.database import get_db


SAMPLE_CHANNELS = [
    {"url": "https://news.ycombinator.com/rss", "name": "Hacker News", "ttl": 3600},
    {"url": "https://www.reddit.com/r/programming/.rss", "name": "Reddit Programming", "ttl": 7200},
    {"url": "https://techcrunch.com/feed/", "name": "TechCrunch", "ttl": 3600},
    {"url": "https://feeds.feedburner.com/oreilly/radar", "name": "O'Reilly Radar", "ttl": None},
]


def main() -> None:
    """Seed the database with sample channels."""
    import argparse

    parser = argparse.ArgumentParser(description="Seed database with sample channels")
    parser.add_argument("--clear", action="store_true", help="Clear existing channels before seeding")
    args = parser.parse_args()

    with get_db() as session:
        if args.clear:
            print("Clearing existing channels...")
            session.query(ChannelModel).delete()
            session.flush()

        for channel_data in SAMPLE_CHANNELS:
            existing = session.query(ChannelModel).filter_by(url=channel_data["url"]).first()

            if existing:
                print(f"Channel already exists: {channel_data['name']}")
                continue

            session.add(ChannelModel(**channel_data))
            print(f"Added channel: {channel_data['name']}")

        session.flush()

        total = session.query(ChannelModel).count()
        print(f"\nTotal channels in database: {total}")


if __name__ == "__main__":
    main()
