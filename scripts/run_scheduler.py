#!/usr/bin/env python3
"""
Run periodic aggregation in the foreground until interrupted.
"""

import sys
import time
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from feed_aggregator.config import get_config
from feed_aggregator.core.services import create_scheduler_service
from feed_aggregator.logger import setup_logger


def main() -> int:
    """Start the aggregation scheduler."""
    import argparse

    parser = argparse.ArgumentParser(description="Run periodic feed aggregation")
    parser.add_argument("--interval", type=int, help="Override the interval in minutes")
    parser.add_argument(
        "--ignore-disabled", action="store_true", help="Run even if SCHEDULER_ENABLED is false"
    )
    args = parser.parse_args()

    if not (get_config().scheduler.enabled or args.ignore_disabled):
        print("Scheduler is disabled (set SCHEDULER_ENABLED=true or pass --ignore-disabled)")
        return 1

    setup_logger()
    service = create_scheduler_service(interval_minutes=args.interval)
    service.start()

    status = service.get_job_status()
    print(f"Scheduler running, next aggregation at {status.next_run_time if status else 'unknown'}")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("Stopping scheduler...")
    finally:
        service.shutdown()

    stats = service.get_stats()
    print(f"{stats.successful_executions} successful, {stats.failed_executions} failed aggregations")
    return 0


if __name__ == "__main__":
    sys.exit(main())
