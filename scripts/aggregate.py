#!/usr/bin/env python3
"""
Refresh channels from the command line.

Without ``--channel`` every channel whose TTL expired is aggregated.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from feed_aggregator.core.services import create_feed_service
from feed_aggregator.exceptions import AggregatorError
from feed_aggregator.logger import setup_logger


def main() -> int:
    """Run one refresh and print a summary."""
    import argparse

    parser = argparse.ArgumentParser(description="Refresh feed channels")
    parser.add_argument("--force", action="store_true", help="Ignore TTLs and read every source")
    parser.add_argument("--channel", type=int, help="Refresh a single channel by id")
    args = parser.parse_args()

    setup_logger()
    service = create_feed_service()

    try:
        if args.channel is not None:
            entries = service.fetch(args.channel, force_refresh=args.force)
        else:
            entries = service.aggregate(force_refresh=args.force)
    except AggregatorError as e:
        print(f"Refresh failed: {e}", file=sys.stderr)
        return 1

    fresh = [entry for entry in entries if entry.fresh]
    for entry in fresh:
        print(f"[new] {entry.title or '(untitled)'} <{entry.link}>")

    print(f"\n{len(entries)} entries, {len(fresh)} new")
    return 0


if __name__ == "__main__":
    sys.exit(main())
