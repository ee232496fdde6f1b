"""Secrets and deployment settings read from environment variables.

Required: SMTP_HOST, SMTP_PORT, GOOGLE_GENERATIVE_AI_API_KEY.
Optional: SMTP_USER and SMTP_PASS (together), SMTP_SENDER_NAME,
SMTP_SENDER_EMAIL, LOG_LEVEL, DATABASE_URL, ENVIRONMENT.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
REQUIRED_VARIABLES = ("SMTP_HOST", "SMTP_PORT", "GOOGLE_GENERATIVE_AI_API_KEY")

DEFAULT_SENDER_NAME = "Job Match"
DEFAULT_DATABASE_URL = "sqlite:///./data/jobmatch.db"
DEFAULT_ENVIRONMENT = "local"


@dataclass
class EnvironmentConfig:
    """Validated environment settings.

    Unset optional values fall back to the module defaults.
    """

    smtp_host: str
    smtp_port: int
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_sender_name: Optional[str] = None
    smtp_sender_email: Optional[str] = None
    ai_api_key: Optional[str] = None
    log_level: Optional[str] = None
    database_url: Optional[str] = None
    environment: Optional[str] = None

    def __post_init__(self):
        self.smtp_sender_name = self.smtp_sender_name or DEFAULT_SENDER_NAME
        self.database_url = self.database_url or DEFAULT_DATABASE_URL
        self.environment = self.environment or DEFAULT_ENVIRONMENT


def _parse_port(raw: str, errors: List[str]) -> Optional[int]:
    try:
        port = int(raw)
    except ValueError:
        errors.append(f"Invalid SMTP_PORT: '{raw}'. Must be a valid integer.")
        return None
    if not 1 <= port <= 65535:
        errors.append(f"Invalid SMTP_PORT: {port}. Must be between 1 and 65535.")
        return None
    return port


def _normalize_sender(raw: str, errors: List[str]) -> Optional[str]:
    try:
        return validate_email(raw, check_deliverability=False).normalized
    except EmailNotValidError as e:
        errors.append(f"Invalid SMTP_SENDER_EMAIL: '{raw}' - {e}")
        return None


def load_environment_config() -> EnvironmentConfig:
    """
    Read and validate the environment.

    Every problem is collected before raising, so one run reports all of them.

    Raises:
        ConfigurationError: If required variables are missing or any value is invalid
    """
    env = {name: os.getenv(name) for name in REQUIRED_VARIABLES}
    errors = [
        f"Missing required environment variable: {name}"
        for name, value in env.items()
        if not value
    ]

    smtp_port = _parse_port(env["SMTP_PORT"], errors) if env["SMTP_PORT"] else None

    sender_email = os.getenv("SMTP_SENDER_EMAIL")
    if sender_email:
        sender_email = _normalize_sender(sender_email, errors)

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        log_level = log_level.upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    smtp_user, smtp_pass = os.getenv("SMTP_USER"), os.getenv("SMTP_PASS")
    if bool(smtp_user) != bool(smtp_pass):
        errors.append("SMTP_USER and SMTP_PASS must be set together for authentication.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                f"Ensure {', '.join(REQUIRED_VARIABLES)} are set",
            ],
        )

    return EnvironmentConfig(
        smtp_host=env["SMTP_HOST"],
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        smtp_sender_name=os.getenv("SMTP_SENDER_NAME"),
        smtp_sender_email=sender_email,
        ai_api_key=env["GOOGLE_GENERATIVE_AI_API_KEY"],
        log_level=log_level,
        database_url=os.getenv("DATABASE_URL"),
        environment=os.getenv("ENVIRONMENT"),
    )
