"""
Facade for periodic aggregation.
"""

from typing import TYPE_CHECKING, Optional

from feed_aggregator.core.scheduler import JobStatus, SchedulerStats
from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedEntry

if TYPE_CHECKING:
    from feed_aggregator.core.services.feed_service import FeedService


class SchedulerService:
    """Facade for running aggregation on a fixed interval."""

    def __init__(
        self,
        feed_service: Optional["FeedService"] = None,
        interval_minutes: Optional[int] = None,
    ):
        """Initialize scheduler service.

        Args:
            feed_service: Service whose ``aggregate`` is scheduled
            interval_minutes: Run interval (default from config)
        """
        from feed_aggregator.core.factories import create_scheduler
        from feed_aggregator.core.services.feed_service import create_feed_service

        feed_service = feed_service or create_feed_service()
        self._scheduler = create_scheduler(feed_service.aggregate, interval_minutes=interval_minutes)
        self._logger = get_logger(__name__)

    def start(self) -> None:
        self._scheduler.start()

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the scheduler.

        Args:
            wait: Wait for a running aggregation to complete
        """
        self._scheduler.stop(wait=wait)

    def is_running(self) -> bool:
        return self._scheduler.is_running()

    def run_now(self) -> list[FeedEntry]:
        return self._scheduler.run_now()

    def get_job_status(self) -> Optional[JobStatus]:
        return self._scheduler.get_job_status()

    def get_stats(self) -> SchedulerStats:
        return self._scheduler.get_stats()


def create_scheduler_service(
    feed_service: Optional["FeedService"] = None,
    interval_minutes: Optional[int] = None,
) -> SchedulerService:
    return SchedulerService(feed_service=feed_service, interval_minutes=interval_minutes)
