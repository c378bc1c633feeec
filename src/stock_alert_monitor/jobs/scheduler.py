"""Fixed-interval trigger for the price monitor, built on APScheduler."""
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from stock_alert_monitor.services.monitor import PriceMonitor

logger = logging.getLogger(__name__)

CYCLE_JOB_ID = "price-check"
STARTUP_JOB_ID = "price-check-startup"


def create_scheduler() -> AsyncIOScheduler:
    """Create an asyncio scheduler with in-memory jobs.

    Missed runs are coalesced into one and a job never runs twice at once.
    """
    return AsyncIOScheduler(
        jobstores={"default": MemoryJobStore()},
        executors={"default": AsyncIOExecutor()},
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 60,
        },
        timezone=timezone.utc,
    )


class CycleTrigger:
    """Runs PriceMonitor.run_cycle every ``interval_minutes``.

    The cycle gates itself on market hours, so the interval job fires
    unconditionally. At start, if the market is open, one extra cycle is
    scheduled ``startup_delay`` seconds out so a cold start does not wait a
    full interval. One trigger per process; there is no cross-process
    coordination.
    """

    def __init__(
        self,
        monitor: PriceMonitor,
        *,
        interval_minutes: int = 5,
        startup_delay: float = 5.0,
        scheduler: AsyncIOScheduler | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._monitor = monitor
        self._interval = timedelta(minutes=interval_minutes)
        self._startup_delay = timedelta(seconds=startup_delay)
        self._scheduler = scheduler or create_scheduler()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def scheduler(self) -> AsyncIOScheduler:
        return self._scheduler

    def register_jobs(self) -> None:
        """Add the interval job, plus the eager startup job when the market is open."""
        self._scheduler.add_job(
            self._monitor.run_cycle,
            trigger=IntervalTrigger(seconds=self._interval.total_seconds()),
            id=CYCLE_JOB_ID,
            name="Check alert prices",
            replace_existing=True,
        )
        if self._monitor.is_market_open():
            run_at = self._clock() + self._startup_delay
            self._scheduler.add_job(
                self._monitor.run_cycle,
                trigger=DateTrigger(run_date=run_at),
                id=STARTUP_JOB_ID,
                name="Initial alert price check",
                replace_existing=True,
            )
            logger.info("Market open; first price check scheduled at %s", run_at.isoformat())

    def start(self) -> None:
        """Register jobs and start the scheduler (needs a running event loop)."""
        self.register_jobs()
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Price monitor started (every %s)", self._interval)

    def shutdown(self) -> None:
        """Stop the scheduler without waiting for an in-flight cycle."""
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Price monitor stopped")
