"""Periodic configuration reload."""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from notifier.logging import get_logger

logger = get_logger(__name__, component="scheduler")

RELOAD_JOB_ID = "config-reload"


class ReloadScheduler:
    """
    Wraps APScheduler to reload the configuration at a fixed interval.

    Uses BackgroundScheduler so reloads happen off the message-processing
    threads; the config holder swaps the snapshot atomically.
    """

    def __init__(
        self,
        reload_callable: Callable[[], object],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the reload scheduler.

        Args:
            reload_callable: Function to call on each run (e.g., holder.reload)
            interval_seconds: Interval between reloads in seconds
            shutdown_event: Optional event to set on shutdown for coordination
        """
        self.reload_callable = reload_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,  # Prevent overlapping reloads
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """
        Start the scheduler and register the reload job.

        The configuration was just loaded at startup, so the first reload
        happens one interval from now.
        """
        trigger = IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc)

        next_run = datetime.now(timezone.utc) + timedelta(seconds=self.interval_seconds)
        self.scheduler.add_job(
            func=self.reload_callable,
            trigger=trigger,
            id=RELOAD_JOB_ID,
            name="Configuration reload",
            replace_existing=True,
            next_run_time=next_run,
        )

        self.scheduler.start()

        logger.info(
            f"Reload scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": next_run.isoformat(),
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: If True, wait for a running reload to complete before returning
        """
        logger.info(
            "Shutting down reload scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Reload scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self) -> None:
        """Reload synchronously in the current thread (e.g. on SIGHUP)."""
        logger.info("Triggering immediate config reload", extra={"event": "scheduler.trigger_now"})
        self.reload_callable()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(RELOAD_JOB_ID)
        return job.next_run_time if job else None
