"""
Periodic aggregation scheduler.

Uses APScheduler to run the aggregation engine on a fixed interval.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from feed_aggregator.config import get_config
from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedEntry

logger = get_logger(__name__)

AGGREGATION_JOB_ID = "aggregate_channels"


@dataclass
class JobStatus:
    """Status of the aggregation job."""

    job_id: str
    name: str
    next_run_time: Optional[datetime]
    is_active: bool
    trigger: str


@dataclass
class SchedulerStats:
    """Statistics for scheduled aggregation runs."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    last_execution_time: Optional[datetime] = None
    last_entries_count: int = 0
    last_fresh_count: int = 0
    last_error: Optional[str] = None
    uptime_seconds: float = 0.0


class AggregationScheduler:
    """Runs ``aggregate(force_refresh=False)`` every ``interval_minutes``.

    TTLs still decide which channels are actually read on each run. A run
    that raises is logged and counted; the job stays scheduled.
    """

    def __init__(
        self,
        aggregate: Callable[..., list[FeedEntry]],
        interval_minutes: Optional[int] = None,
    ):
        """Initialize aggregation scheduler.

        Args:
            aggregate: Aggregation callable, usually ``FeedAggregator.aggregate``
            interval_minutes: Run interval (default from config)
        """
        config = get_config().scheduler

        self._aggregate = aggregate
        self.interval_minutes = interval_minutes or config.interval_minutes

        # One executor thread: runs must not overlap
        self.scheduler = BackgroundScheduler(
            executors={"default": ThreadPoolExecutor(max_workers=1)},
            job_defaults={
                "coalesce": config.coalesce,
                "max_instances": 1,
                "misfire_grace_time": config.misfire_grace_time,
            },
            timezone=config.timezone,
        )

        self.stats = SchedulerStats()
        self.start_time: Optional[datetime] = None
        self._lock = threading.Lock()

        self.scheduler.add_listener(self._on_job_executed, EVENT_JOB_EXECUTED)
        self.scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)

    def start(self) -> None:
        """Start the scheduler and register the aggregation job."""
        if self.scheduler.running:
            logger.warning("Scheduler is already running")
            return

        self.scheduler.add_job(
            func=self._run,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=AGGREGATION_JOB_ID,
            name="Aggregate channels",
            replace_existing=True,
        )
        self.scheduler.start()
        self.start_time = datetime.now()
        logger.info(f"Scheduler started, aggregating every {self.interval_minutes} minutes")

    def stop(self, wait: bool = True) -> None:
        """Stop the scheduler.

        Args:
            wait: Whether to wait for a running aggregation to complete
        """
        if not self.scheduler.running:
            logger.warning("Scheduler is not running")
            return

        self.scheduler.shutdown(wait=wait)
        if self.start_time:
            self.stats.uptime_seconds = (datetime.now() - self.start_time).total_seconds()
        logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        return self.scheduler.running

    def run_now(self) -> list[FeedEntry]:
        """Run one aggregation synchronously in the calling thread.

        Unlike scheduled runs, errors propagate to the caller after being
        counted.
        """
        try:
            entries = self._aggregate(force_refresh=False)
        except Exception as e:
            self._record_failure(e)
            raise

        self._record_success(entries)
        return entries

    def get_job_status(self) -> Optional[JobStatus]:
        job = self.scheduler.get_job(AGGREGATION_JOB_ID)
        if job is None:
            return None

        return JobStatus(
            job_id=job.id,
            name=job.name,
            next_run_time=getattr(job, "next_run_time", None),
            is_active=getattr(job, "next_run_time", None) is not None,
            trigger=str(job.trigger),
        )

    def get_stats(self) -> SchedulerStats:
        if self.start_time and self.scheduler.running:
            self.stats.uptime_seconds = (datetime.now() - self.start_time).total_seconds()
        return self.stats

    def _run(self) -> list[FeedEntry]:
        return self._aggregate(force_refresh=False)

    def _record_success(self, entries: list[FeedEntry]) -> None:
        fresh = sum(1 for entry in entries if entry.fresh)
        with self._lock:
            self.stats.total_executions += 1
            self.stats.successful_executions += 1
            self.stats.last_execution_time = datetime.now()
            self.stats.last_entries_count = len(entries)
            self.stats.last_fresh_count = fresh
            self.stats.last_error = None

        logger.info(f"Aggregation finished: {len(entries)} entries, {fresh} new")

    def _record_failure(self, error: BaseException) -> None:
        with self._lock:
            self.stats.total_executions += 1
            self.stats.failed_executions += 1
            self.stats.last_execution_time = datetime.now()
            self.stats.last_error = str(error)

        logger.error(f"Aggregation failed: {error}")

    def _on_job_executed(self, event: JobExecutionEvent) -> None:
        self._record_success(event.retval or [])

    def _on_job_error(self, event: JobExecutionEvent) -> None:
        self._record_failure(event.exception)
