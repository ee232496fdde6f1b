"""Email notifications for matching results.

This module provides the notification fan-out:
- NotificationDispatcher: emails top candidates and everyone else
- SendRateLimiter: minimum spacing between sends
- TemplateRenderer: Jinja2-based email template rendering
- SMTPClient: SMTP wrapper with TLS/SSL support
"""

from .models import (
    DispatchSummary,
    NotificationDispatchError,
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .rate_limiter import SendRateLimiter
from .service import NotificationDispatcher
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import IMPROVEMENT, TOP_CANDIDATE, RenderedEmail, TemplateRenderer

__all__ = [
    "NotificationDispatcher",
    "DispatchSummary",
    "NotificationResult",
    "NotificationError",
    "NotificationTemplateError",
    "NotificationDispatchError",
    "SMTPDeliveryError",
    "SendRateLimiter",
    "TemplateRenderer",
    "RenderedEmail",
    "TOP_CANDIDATE",
    "IMPROVEMENT",
    "SMTPClient",
    "build_sender_address",
    "normalize_recipient",
]
