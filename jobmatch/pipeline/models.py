"""Data models for matching run tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from jobmatch.matching.models import MatchReport
from jobmatch.notifications.models import DispatchSummary


@dataclass
class MatchRunResult:
    """
    Outcome of one matching pass.

    Attributes:
        run_id: Identifier attached to every log line of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        total_duration_seconds: Wall time for the run
        users_loaded: Users read from the database
        jobs_loaded: Jobs read from the database
        report: Matcher output (empty when skipped)
        dispatch: Emails sent (None when skipped or nothing matched)
        skipped: Whether the run was skipped because another run held the lock
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    total_duration_seconds: float = 0.0
    users_loaded: int = 0
    jobs_loaded: int = 0
    report: MatchReport = field(default_factory=MatchReport)
    dispatch: Optional[DispatchSummary] = None
    skipped: bool = False

    def __post_init__(self):
        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()

    @property
    def emails_sent(self) -> int:
        return self.dispatch.total_sent if self.dispatch is not None else 0
