"""Notification dispatcher for match results.

This module provides NotificationDispatcher, which turns a MatchReport into
emails: a "top candidate" email for each matched user and an "improve your
skills" email, carrying an AI-written suggestion, for everyone else.
"""

import logging
import time
from email.message import EmailMessage
from typing import Callable, Dict, Optional, Sequence

from jobmatch.ai.base import SuggestionProvider
from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.models import EmailConfig
from jobmatch.domain.exceptions import ProviderError
from jobmatch.domain.models import User
from jobmatch.logging import get_logger
from jobmatch.logging.context import log_context
from jobmatch.matching.models import MatchReport, SimilarityResult

from .models import (
    DispatchSummary,
    NotificationDispatchError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .rate_limiter import SendRateLimiter
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import IMPROVEMENT, TOP_CANDIDATE, RenderedEmail, TemplateRenderer

logger = get_logger(__name__, component="notification")

MAX_RETRY_DELAY = 60.0


class NotificationDispatcher:
    """Fans match results out to users by email.

    For every result in the report, in ranked order:
    1. Send a "top candidate" email to the matched user
    2. Fetch an improvement suggestion for the job title (once per title)
    3. Send an "improve your skills" email to every other user in the pass

    Sends are paced by a SendRateLimiter and retried with exponential backoff.
    The first delivery or suggestion failure aborts the remaining fan-out with
    NotificationDispatchError.
    """

    def __init__(
        self,
        suggestion_provider: SuggestionProvider,
        env_config: EnvironmentConfig,
        email_config: EmailConfig,
        smtp_client: Optional[SMTPClient] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        rate_limiter: Optional[SendRateLimiter] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the dispatcher.

        Args:
            suggestion_provider: Source of improvement suggestions
            env_config: SMTP host and sender settings
            email_config: Retry, TLS and pacing settings
            smtp_client: SMTP client instance (creates default if None)
            template_renderer: Template renderer instance (creates default if None)
            rate_limiter: Send pacing (defaults to email_config.send_interval_seconds)
            sleep: Used for retry backoff delays
            logger_instance: Logger instance (uses module logger if None)
        """
        self.suggestion_provider = suggestion_provider
        self.env_config = env_config
        self.email_config = email_config
        self.smtp_client = smtp_client or SMTPClient()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.rate_limiter = rate_limiter or SendRateLimiter(email_config.send_interval_seconds)
        self._sleep = sleep
        self.logger = logger_instance or logger

    def dispatch(self, report: MatchReport, users: Sequence[User]) -> DispatchSummary:
        """Send every email implied by a match report.

        Args:
            report: Output of a matching pass
            users: All users that took part in the pass

        Returns:
            DispatchSummary listing each delivered email

        Raises:
            NotificationDispatchError: On the first delivery, template or
                suggestion failure; earlier sends are kept in its summary
        """
        summary = DispatchSummary()
        suggestions: Dict[str, str] = {}

        for result in report.all_similarities:
            with log_context(job_id=result.job_id, user_id=result.user_id):
                try:
                    self._notify_match(result, users, suggestions, summary)
                except (ProviderError, NotificationTemplateError, ValueError) as e:
                    self.logger.error(
                        f"Aborting notification fan-out for job '{result.job_title}': {e}",
                        extra={
                            "event": "notification.dispatch.aborted",
                            "error_type": type(e).__name__,
                            "sent_before_failure": summary.total_sent,
                        },
                    )
                    raise NotificationDispatchError(
                        f"Notification fan-out aborted: {e}", summary=summary
                    ) from e

        self.logger.info(
            f"Notification dispatch complete: {summary.top_candidate_sent} top candidate, "
            f"{summary.improvement_sent} improvement emails",
            extra={
                "event": "notification.dispatch.completed",
                "results": len(report.all_similarities),
                "sent": summary.total_sent,
                "suggestions_requested": summary.suggestions_requested,
            },
        )
        return summary

    def _notify_match(
        self,
        result: SimilarityResult,
        users: Sequence[User],
        suggestions: Dict[str, str],
        summary: DispatchSummary,
    ) -> None:
        rendered = self.template_renderer.render(
            TOP_CANDIDATE,
            {
                "user_name": result.user_name,
                "job_title": result.job_title,
                "matched_skills": result.matched_skills,
                "similarity_percent": result.max_similarity * 100,
                "sender_name": self.env_config.smtp_sender_name,
            },
        )
        attempts = self._send(result.email, rendered)
        summary.results.append(
            NotificationResult(
                kind=TOP_CANDIDATE,
                user_id=result.user_id,
                email=result.email,
                job_id=result.job_id,
                attempts=attempts,
            )
        )

        rejected = [user for user in users if user.id != result.user_id]
        if not rejected:
            return

        suggestion = suggestions.get(result.job_title)
        if suggestion is None:
            suggestion = self.suggestion_provider.suggest_improvements(result.job_title)
            suggestions[result.job_title] = suggestion
            summary.suggestions_requested += 1

        for user in rejected:
            rendered = self.template_renderer.render(
                IMPROVEMENT,
                {
                    "user_name": user.full_name or user.username,
                    "job_title": result.job_title,
                    "suggestion": suggestion,
                    "sender_name": self.env_config.smtp_sender_name,
                },
            )
            attempts = self._send(user.email, rendered)
            summary.results.append(
                NotificationResult(
                    kind=IMPROVEMENT,
                    user_id=user.id,
                    email=user.email,
                    job_id=result.job_id,
                    attempts=attempts,
                )
            )

    def _build_message(self, recipient: str, rendered: RenderedEmail) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = rendered.subject
        message["From"] = build_sender_address(self.env_config)
        message["To"] = recipient
        message.set_content(rendered.text_body)
        message.add_alternative(rendered.html_body, subtype="html")
        return message

    def _send(self, address: str, rendered: RenderedEmail) -> int:
        """Deliver one message with pacing and retry/backoff.

        Returns:
            Number of attempts used

        Raises:
            SMTPDeliveryError: If every attempt fails
            ValueError: If the recipient address is invalid
        """
        recipient = normalize_recipient(address)
        message = self._build_message(recipient, rendered)
        max_attempts = self.email_config.max_retries + 1

        self.rate_limiter.wait()

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.email_config.retry_initial_delay * (
                    self.email_config.retry_backoff_multiplier ** (attempt - 2)
                )
                delay = min(delay, MAX_RETRY_DELAY)
                self.logger.warning(
                    f"Retrying delivery to {recipient} (attempt {attempt}/{max_attempts}) "
                    f"after {delay:.1f}s delay",
                    extra={"event": "notification.send.attempt", "attempt": attempt},
                )
                self._sleep(delay)

            try:
                self.smtp_client.send(message, self.env_config, self.email_config.use_tls)
            except SMTPDeliveryError as e:
                if attempt < max_attempts:
                    self.logger.warning(
                        f"SMTP delivery to {recipient} failed (attempt {attempt}/{max_attempts}): {e}",
                        extra={
                            "event": "notification.send.failure",
                            "attempt": attempt,
                            "retry_remaining": True,
                        },
                    )
                    continue
                self.logger.error(
                    f"SMTP delivery to {recipient} failed after {max_attempts} attempts: {e}",
                    extra={
                        "event": "notification.send.failure",
                        "attempt": attempt,
                        "retry_remaining": False,
                    },
                )
                raise

            self.logger.info(
                f"Sent '{rendered.subject}' to {recipient} (attempts: {attempt})",
                extra={"event": "notification.send.success", "attempt": attempt},
            )
            return attempt

        # max_retries >= 0 guarantees at least one attempt above
        raise SMTPDeliveryError(f"No delivery attempt made for {recipient}")
