"""Scheduler service for periodic matching passes."""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from jobmatch.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "matching-pass"


class SchedulerService:
    """
    Wraps APScheduler to run the matching pipeline on an interval.

    Uses BackgroundScheduler so the main thread stays free to handle signals
    and coordinate shutdown.
    """

    def __init__(
        self,
        run_callable: Callable[[], Any],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        """
        Initialize the scheduler service.

        Args:
            run_callable: Called on each tick (normally MatchingPipeline.run_once)
            interval_seconds: Interval between runs in seconds
            shutdown_event: Optional event set on shutdown for coordination
            scheduler: Pre-built scheduler (tests)
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.run_callable = run_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event
        self.scheduler = scheduler or BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """
        Register the matching job and start the scheduler.

        The first run executes immediately; later runs follow the interval.
        Calling start() on a running scheduler does nothing.
        """
        if self.is_running():
            logger.warning("Scheduler already running", extra={"event": "scheduler.already_running"})
            return

        next_run = datetime.now(timezone.utc)
        self.scheduler.add_job(
            func=self._run_scheduled,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="Job matching pass",
            replace_existing=True,
            next_run_time=next_run,
        )
        self.scheduler.start()

        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": next_run.isoformat(),
            },
        )

    def _run_scheduled(self) -> None:
        # Later ticks still run after a failed pass
        try:
            self.run_callable()
        except Exception as e:
            logger.error(
                f"Scheduled matching pass failed: {e}",
                exc_info=True,
                extra={"event": "scheduler.run.failed", "error_type": type(e).__name__},
            )

    def shutdown(self, wait: bool = False) -> None:
        """
        Stop the scheduler.

        Args:
            wait: If True, wait for a running pass to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.is_running():
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """Next scheduled run, or None if the job is not registered."""
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
