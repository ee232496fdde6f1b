"""Matching pipeline orchestration."""

import threading
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from jobmatch.logging import get_logger
from jobmatch.logging.context import log_context
from jobmatch.matching.engine import SimilarityMatcher
from jobmatch.notifications.models import NotificationDispatchError
from jobmatch.notifications.service import NotificationDispatcher
from jobmatch.persistence.database import get_session
from jobmatch.persistence.repositories import JobRepository, UserRepository

from .models import MatchRunResult

logger = get_logger(__name__, component="pipeline")


class MatchingPipeline:
    """
    Runs one matching pass: load users and jobs, match, notify.

    Only one pass runs at a time. By default a pass waits for one already in
    flight, so a job saved mid-pass is still matched once that pass ends.
    Scheduler ticks pass wait=False and are skipped instead of queued.
    """

    def __init__(
        self,
        matcher: SimilarityMatcher,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        """
        Initialize the matching pipeline.

        Args:
            matcher: Matcher applied to the loaded snapshots
            dispatcher: Sends emails for the report; None disables notifications
        """
        self.matcher = matcher
        self.dispatcher = dispatcher
        self._lock = threading.Lock()

    def run_once(self, *, wait: bool = True) -> MatchRunResult:
        """
        Execute a complete matching pass.

        This method:
        1. Acquires the run lock, or returns a skipped result when wait is
           False and another pass holds it
        2. Loads every user and job in a single read-only session
        3. Runs the matcher over the snapshots
        4. Hands the report and the user snapshot to the dispatcher

        Args:
            wait: Block until a running pass finishes instead of skipping

        Returns:
            MatchRunResult with counts, the report and timing

        Raises:
            NotificationDispatchError: If the notification fan-out is aborted
            PersistenceError: If users or jobs cannot be loaded
        """
        run_started_at = datetime.now(timezone.utc)
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            if wait:
                with log_context(run_id=run_id):
                    logger.info(
                        "Matching run waiting for the pass in progress",
                        extra={"event": "pipeline.run.waiting"},
                    )
                self._lock.acquire()
            else:
                with log_context(run_id=run_id):
                    logger.warning(
                        "Matching run skipped: previous run still in progress",
                        extra={"event": "pipeline.run.skipped", "reason": "lock_held"},
                    )
                return MatchRunResult(
                    run_id=run_id,
                    run_started_at=run_started_at,
                    run_finished_at=datetime.now(timezone.utc),
                    skipped=True,
                )

        try:
            with log_context(run_id=run_id):
                logger.info("Matching run started", extra={"event": "pipeline.run.started"})

                with get_session() as session:
                    users = UserRepository(session).list_all()
                    jobs = JobRepository(session).list_all()

                report = self.matcher.find_similarity(users, jobs)

                dispatch = None
                if self.dispatcher is not None and not report.is_empty:
                    try:
                        dispatch = self.dispatcher.dispatch(report, users)
                    except NotificationDispatchError as e:
                        logger.error(
                            f"Matching run failed during notification: {e}",
                            exc_info=True,
                            extra={"event": "pipeline.run.failed", "error_type": type(e).__name__},
                        )
                        raise

                result = MatchRunResult(
                    run_id=run_id,
                    run_started_at=run_started_at,
                    run_finished_at=datetime.now(timezone.utc),
                    users_loaded=len(users),
                    jobs_loaded=len(jobs),
                    report=report,
                    dispatch=dispatch,
                )

                logger.info(
                    "Matching run completed",
                    extra={
                        "event": "pipeline.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "users_loaded": result.users_loaded,
                        "jobs_loaded": result.jobs_loaded,
                        "total_comparisons": report.total_comparisons,
                        "matches": len(report.all_similarities),
                        "emails_sent": result.emails_sent,
                    },
                )
                return result

        finally:
            self._lock.release()
