"""Data models and exceptions for the notification dispatcher.

This module defines result types and custom exceptions used throughout
the notification fan-out.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from jobmatch.domain.exceptions import JobMatchError, ProviderError


class NotificationError(JobMatchError):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError, ProviderError):
    """Raised when the mail transport rejects or cannot deliver a message."""

    pass


class NotificationDispatchError(NotificationError):
    """Raised when the fan-out is aborted part way through.

    Attributes:
        summary: What had been sent before the failure
    """

    def __init__(self, message: str, summary: Optional["DispatchSummary"] = None):
        super().__init__(message)
        self.summary = summary


@dataclass
class NotificationResult:
    """Outcome of one delivered email.

    Attributes:
        kind: "top_candidate" or "improvement"
        user_id: Recipient user id
        email: Recipient address
        job_id: Job the email is about
        attempts: Number of send attempts made
    """

    kind: str
    user_id: str
    email: str
    job_id: str
    attempts: int


@dataclass
class DispatchSummary:
    """Everything sent during one dispatch call."""

    results: List[NotificationResult] = field(default_factory=list)
    suggestions_requested: int = 0

    @property
    def top_candidate_sent(self) -> int:
        return sum(1 for r in self.results if r.kind == "top_candidate")

    @property
    def improvement_sent(self) -> int:
        return sum(1 for r in self.results if r.kind == "improvement")

    @property
    def total_sent(self) -> int:
        return len(self.results)
