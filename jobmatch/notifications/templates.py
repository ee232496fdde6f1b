"""Template rendering for email notifications using Jinja2.

Each email kind has a subject, an HTML body and a plain text body template
under jobmatch/notifications/email_templates, named ``<kind>_subject.j2``,
``<kind>_body.html.j2`` and ``<kind>_body.txt.j2``.
"""

import logging
from dataclasses import dataclass
from typing import Dict

from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)

TOP_CANDIDATE = "top_candidate"
IMPROVEMENT = "improvement"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


class TemplateRenderer:
    """Renders email templates using Jinja2.

    Templates are cached by the Jinja2 environment, and StrictUndefined turns
    any missing variable into a NotificationTemplateError. Only the HTML body
    templates are auto-escaped.
    """

    def __init__(self, template_dir: str = "email_templates"):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within the jobmatch.notifications package
        """
        self.env = Environment(
            loader=PackageLoader("jobmatch.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            undefined=StrictUndefined,
        )
        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(self, kind: str, context: Dict) -> RenderedEmail:
        """Render the subject and both bodies for one email kind.

        Args:
            kind: Template prefix, e.g. "top_candidate" or "improvement"
            context: Dictionary of template variables

        Returns:
            RenderedEmail with a single-line subject

        Raises:
            NotificationTemplateError: If a template is missing or fails to render
        """
        try:
            subject = self.env.get_template(f"{kind}_subject.j2").render(context)
            html_body = self.env.get_template(f"{kind}_body.html.j2").render(context)
            text_body = self.env.get_template(f"{kind}_body.txt.j2").render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for '{kind}': {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        return RenderedEmail(
            subject=" ".join(subject.split()),
            html_body=html_body,
            text_body=text_body,
        )
