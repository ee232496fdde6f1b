"""Unit tests for notification template rendering.

Tests the TemplateRenderer for:
- Subject, HTML, and text rendering for both email kinds
- Context variable interpolation
- HTML auto-escaping (HTML bodies only)
- Strict undefined variable detection
"""

import pytest

from jobmatch.notifications.models import NotificationTemplateError
from jobmatch.notifications.templates import (
    IMPROVEMENT,
    TOP_CANDIDATE,
    RenderedEmail,
    TemplateRenderer,
)


@pytest.fixture
def renderer():
    return TemplateRenderer()


@pytest.fixture
def top_candidate_context():
    return {
        "user_name": "Ada Lovelace",
        "job_title": "Data Engineer",
        "matched_skills": 3,
        "similarity_percent": 91.6,
        "sender_name": "Job Match",
    }


@pytest.fixture
def improvement_context():
    return {
        "user_name": "Grace Hopper",
        "job_title": "Data Engineer",
        "suggestion": "Build a streaming pipeline with Kafka.\nContribute to an ETL project.",
        "sender_name": "Job Match",
    }


def test_top_candidate_email(renderer, top_candidate_context):
    email = renderer.render(TOP_CANDIDATE, top_candidate_context)

    assert isinstance(email, RenderedEmail)
    assert email.subject == "You're a top candidate for Data Engineer"
    assert "Hi Ada Lovelace," in email.text_body
    assert "Matched skills: 3" in email.text_body
    assert "Match score: 92%" in email.text_body
    assert "<strong>Data Engineer</strong>" in email.html_body
    assert "92%" in email.html_body


def test_improvement_email(renderer, improvement_context):
    email = renderer.render(IMPROVEMENT, improvement_context)

    assert email.subject == "Thank you for your interest in Data Engineer"
    assert "Hi Grace Hopper," in email.text_body
    assert "Build a streaming pipeline with Kafka.\nContribute to an ETL project." in email.text_body
    assert "Build a streaming pipeline with Kafka." in email.html_body
    assert "Job Match" in email.html_body


def test_subject_is_single_line(renderer, top_candidate_context):
    top_candidate_context["job_title"] = "Data\nEngineer"
    email = renderer.render(TOP_CANDIDATE, top_candidate_context)

    assert "\n" not in email.subject
    assert email.subject == "You're a top candidate for Data Engineer"


def test_html_body_escapes_values(renderer, improvement_context):
    improvement_context["suggestion"] = "<script>alert('x')</script> Learn SQL & dbt"

    email = renderer.render(IMPROVEMENT, improvement_context)

    assert "<script>" not in email.html_body
    assert "&lt;script&gt;" in email.html_body
    assert "Learn SQL &amp; dbt" in email.html_body


def test_text_parts_are_not_escaped(renderer, improvement_context):
    improvement_context["job_title"] = "R&D Lead"
    improvement_context["suggestion"] = "Learn SQL & dbt"

    email = renderer.render(IMPROVEMENT, improvement_context)

    assert email.subject == "Thank you for your interest in R&D Lead"
    assert "Learn SQL & dbt" in email.text_body


def test_missing_variable_raises(renderer, top_candidate_context):
    del top_candidate_context["similarity_percent"]

    with pytest.raises(NotificationTemplateError, match="top_candidate"):
        renderer.render(TOP_CANDIDATE, top_candidate_context)


def test_unknown_kind_raises(renderer, improvement_context):
    with pytest.raises(NotificationTemplateError):
        renderer.render("weekly_digest", improvement_context)


def test_templates_are_cached(renderer, improvement_context):
    renderer.render(IMPROVEMENT, improvement_context)
    first = renderer.env.get_template("improvement_subject.j2")
    renderer.render(IMPROVEMENT, improvement_context)
    assert renderer.env.get_template("improvement_subject.j2") is first
