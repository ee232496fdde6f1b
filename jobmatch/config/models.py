"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MatchingConfig(BaseModel):
    """Similarity matching and trigger settings."""

    threshold: float = Field(
        0.8,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for a skill/category pair to count as matched",
    )
    schedule_interval: str = Field(
        "1h", description="Interval between periodic matching passes in daemon mode"
    )
    run_on_job_create: bool = Field(
        True, description="Run a matching pass synchronously after each job is created"
    )

    # Computed field
    schedule_interval_seconds: Optional[int] = None

    @field_validator("schedule_interval")
    @classmethod
    def validate_schedule_interval(cls, v: str) -> str:
        """Reject intervals that cannot be parsed or fall outside 5m..24h."""
        try:
            validate_duration_range(parse_duration(v))
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def compute_interval_seconds(self):
        self.schedule_interval_seconds = parse_duration(self.schedule_interval)
        return self


class AIConfig(BaseModel):
    """Settings for the embedding and text generation provider."""

    base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        min_length=1,
        description="Base URL of the Generative Language REST API",
    )
    embedding_model: str = Field("text-embedding-004", min_length=1)
    generation_model: str = Field("gemini-1.5-flash", min_length=1)
    request_timeout: int = Field(
        30, ge=5, le=300, description="Timeout for provider HTTP calls (seconds)"
    )
    max_retries: int = Field(
        2, ge=0, le=5, description="Retries for throttled, failed or timed-out provider calls"
    )
    retry_initial_delay: float = Field(
        1.0, ge=0.1, le=30.0, description="Delay before the first provider retry (seconds)"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for provider retries"
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        stripped = v.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return stripped

    @field_validator("embedding_model", "generation_model")
    @classmethod
    def strip_model_prefix(cls, v: str) -> str:
        """Accept both 'text-embedding-004' and 'models/text-embedding-004'."""
        stripped = v.strip()
        if stripped.startswith("models/"):
            stripped = stripped[len("models/"):]
        if not stripped:
            raise ValueError("Model name cannot be empty")
        return stripped


class EmailConfig(BaseModel):
    """Email delivery, retry and pacing settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    max_retries: int = Field(
        3, ge=0, le=10, description="Number of retry attempts for failed email sends"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: float = Field(
        5, ge=0, le=60, description="Initial retry delay in seconds"
    )
    send_interval_seconds: float = Field(
        5.0,
        ge=0.0,
        le=300.0,
        description="Minimum spacing between consecutive sends to the mail provider",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the job matching service."""

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
