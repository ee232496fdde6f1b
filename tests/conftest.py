"""Shared fixtures: in-memory database, fake AI providers, SMTP settings."""

from unittest.mock import Mock

import pytest

from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.models import EmailConfig
from jobmatch.logging.context import clear_log_context
from jobmatch.persistence import close_database, init_database
from tests.helpers import FakeEmbedder, FakeSuggester


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def database():
    """Fresh in-memory database for one test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def fake_embedder():
    return FakeEmbedder(
        {
            "python": [1.0, 0.0, 0.0],
            "backend": [0.9, 0.1, 0.0],
            "design": [0.0, 1.0, 0.0],
            "figma": [0.0, 0.9, 0.1],
        }
    )


@pytest.fixture
def fake_suggester():
    return FakeSuggester()


@pytest.fixture
def env_config():
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="mailer@example.com",
        smtp_pass="secret",
        smtp_sender_name="Job Match",
        ai_api_key="test-key",
    )


@pytest.fixture
def email_config():
    """Two retries, no pacing delay."""
    return EmailConfig(
        use_tls=True,
        max_retries=2,
        retry_backoff_multiplier=2.0,
        retry_initial_delay=1,
        send_interval_seconds=0,
    )


@pytest.fixture
def mock_smtp_client():
    return Mock()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Minimal valid environment for load_environment_config()."""
    for name in (
        "SMTP_USER",
        "SMTP_PASS",
        "SMTP_SENDER_NAME",
        "SMTP_SENDER_EMAIL",
        "LOG_LEVEL",
        "DATABASE_URL",
        "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)
    values = {
        "SMTP_HOST": "smtp.example.com",
        "SMTP_PORT": "587",
        "GOOGLE_GENERATIVE_AI_API_KEY": "test-key",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values
