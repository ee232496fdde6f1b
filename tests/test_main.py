"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Configuration loading with priority (CLI > env > config)
- Application wiring (job-create matching hook)
- Command dispatch (match, serve, add-user, list-users)
- Exit code handling
- Error handling
"""

import json
import threading
from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.exceptions import ConfigurationError
from jobmatch.config.models import AppConfig, LoggingConfig, MatchingConfig
from jobmatch.domain.exceptions import ValidationError
from jobmatch.main import (
    Application,
    build_parser,
    entity_to_dict,
    load_runtime_config,
    main,
)
from jobmatch.matching.models import MatchReport, SimilarityResult
from jobmatch.pipeline import MatchRunResult
from tests.helpers import NOW, FakeEmbedder, make_user


def _env_config(**overrides):
    fields = {
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "ai_api_key": "test-key",
        "database_url": "sqlite:///:memory:",
    }
    fields.update(overrides)
    return EnvironmentConfig(**fields)


def _run_result():
    result = SimilarityResult(
        user_id="u1",
        user_name="Ada Lovelace",
        email="ada@example.com",
        job_id="j1",
        job_title="Data Engineer",
        matched_skills=1,
        max_similarity=1.0,
    )
    report = MatchReport(2, [result], [result])
    return MatchRunResult(
        run_id="run-1",
        run_started_at=NOW,
        run_finished_at=NOW,
        report=report,
    )


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    @patch("jobmatch.main.load_config")
    def test_cli_level_wins(self, mock_load):
        mock_load.return_value = (AppConfig(), _env_config(log_level="WARNING"))

        _, env_config = load_runtime_config(None, "DEBUG")

        assert env_config.log_level == "DEBUG"

    @patch("jobmatch.main.load_config")
    def test_environment_level_beats_config(self, mock_load):
        app_config = AppConfig(logging=LoggingConfig(level="ERROR"))
        mock_load.return_value = (app_config, _env_config(log_level="WARNING"))

        _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "WARNING"

    @patch("jobmatch.main.load_config")
    def test_config_level_is_the_fallback(self, mock_load):
        app_config = AppConfig(logging=LoggingConfig(level="ERROR"))
        mock_load.return_value = (app_config, _env_config())

        _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "ERROR"

    @patch("jobmatch.main.load_config")
    def test_config_path_is_passed_through(self, mock_load, tmp_path):
        mock_load.return_value = (AppConfig(), _env_config())
        load_runtime_config(tmp_path / "config.yaml", None)
        mock_load.assert_called_once_with(tmp_path / "config.yaml")


class TestParser:
    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_add_job_arguments(self):
        args = build_parser().parse_args(
            [
                "--log-level",
                "DEBUG",
                "add-job",
                "--title",
                "Data Engineer",
                "--description",
                "Build and run our data pipelines",
                "--categories",
                "python",
                "sql",
                "--posted-by",
                "u1",
            ]
        )

        assert args.command == "add-job"
        assert args.log_level == "DEBUG"
        assert args.categories == ["python", "sql"]
        assert args.posted_by == "u1"

    def test_add_job_requires_posting_user(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                [
                    "add-job",
                    "--title",
                    "Data Engineer",
                    "--description",
                    "Build and run our data pipelines",
                    "--categories",
                    "python",
                ]
            )

    def test_add_user_defaults(self):
        args = build_parser().parse_args(
            ["add-user", "--first-name", "Ada", "--last-name", "Lovelace",
             "--username", "ada", "--email", "ada@example.com"]
        )
        assert args.user_type == "candidate"
        assert args.skills is None

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--log-level", "LOUD", "match"])


class TestApplication:
    @patch("jobmatch.main.GoogleAIClient")
    def test_job_create_hook_enabled_by_default(self, mock_client):
        app = Application(AppConfig(), _env_config())

        assert app.jobs.on_job_created == app._match_after_create
        assert app.pipeline.matcher.threshold == 0.8
        mock_client.assert_called_once()

    @patch("jobmatch.main.GoogleAIClient")
    def test_job_create_hook_can_be_disabled(self, mock_client):
        app_config = AppConfig(matching=MatchingConfig(run_on_job_create=False, threshold=0.9))

        app = Application(app_config, _env_config())

        assert app.jobs.on_job_created is None
        assert app.pipeline.matcher.threshold == 0.9

    @patch("jobmatch.main.GoogleAIClient")
    def test_hook_runs_a_matching_pass(self, mock_client):
        app = Application(AppConfig(), _env_config())
        app.pipeline = Mock()

        app._match_after_create(Mock(title="Data Engineer"))

        app.pipeline.run_once.assert_called_once()


def test_entity_to_dict_hides_vectors():
    data = entity_to_dict(make_user("u1", embeddings=[[1.0, 0.0]]))

    assert "embeddings" not in data
    assert data["has_embeddings"] is True
    assert data["created_at"].startswith("2026-01-15T09:30:00")


class TestMain:
    """Test suite for main() function."""

    @patch("jobmatch.main.Application")
    @patch("jobmatch.main.init_database")
    @patch("jobmatch.main.close_database")
    @patch("jobmatch.main.configure_logging")
    @patch("jobmatch.main.load_runtime_config")
    def test_match_prints_report(
        self, mock_load, mock_logging, mock_close, mock_init, mock_app_cls, capsys
    ):
        mock_load.return_value = (AppConfig(), _env_config(log_level="INFO"))
        mock_app_cls.return_value.pipeline.run_once.return_value = _run_result()

        exit_code = main(["match"])

        assert exit_code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["totalComparisons"] == 2
        assert report["allSimilarities"][0]["userId"] == "u1"
        mock_init.assert_called_once_with("sqlite:///:memory:")
        mock_close.assert_called_once()
        mock_logging.assert_called_once_with(
            level="INFO", format_type="key-value", environment="local"
        )

    @patch("jobmatch.main.load_runtime_config")
    def test_configuration_error(self, mock_load, capsys):
        mock_load.side_effect = ConfigurationError("Missing SMTP_HOST")

        assert main(["match"]) == 1
        assert "Configuration Error: Missing SMTP_HOST" in capsys.readouterr().err

    @patch("jobmatch.main.Application")
    @patch("jobmatch.main.init_database")
    @patch("jobmatch.main.close_database")
    @patch("jobmatch.main.configure_logging")
    @patch("jobmatch.main.load_runtime_config")
    def test_domain_error_exits_non_zero(
        self, mock_load, mock_logging, mock_close, mock_init, mock_app_cls, capsys
    ):
        mock_load.return_value = (AppConfig(), _env_config(log_level="INFO"))
        mock_app_cls.return_value.users.create_user.side_effect = ValidationError(
            "User with this email already exists"
        )

        exit_code = main(
            ["add-user", "--first-name", "Ada", "--last-name", "Lovelace",
             "--username", "ada", "--email", "ada@example.com"]
        )

        assert exit_code == 1
        assert "Error: User with this email already exists" in capsys.readouterr().err
        mock_close.assert_called_once()

    @patch("jobmatch.main.Application")
    @patch("jobmatch.main.init_database")
    @patch("jobmatch.main.close_database")
    @patch("jobmatch.main.configure_logging")
    @patch("jobmatch.main.load_runtime_config")
    def test_unexpected_error_is_fatal(
        self, mock_load, mock_logging, mock_close, mock_init, mock_app_cls, capsys
    ):
        mock_load.return_value = (AppConfig(), _env_config(log_level="INFO"))
        mock_app_cls.return_value.pipeline.run_once.side_effect = RuntimeError("boom")

        assert main(["match"]) == 1
        assert "Fatal error: boom" in capsys.readouterr().err

    @patch("signal.signal")
    @patch("jobmatch.main.SchedulerService")
    @patch("jobmatch.main.Application")
    @patch("jobmatch.main.init_database")
    @patch("jobmatch.main.close_database")
    @patch("jobmatch.main.configure_logging")
    @patch("jobmatch.main.load_runtime_config")
    def test_serve_starts_scheduler(
        self,
        mock_load,
        mock_logging,
        mock_close,
        mock_init,
        mock_app_cls,
        mock_scheduler_cls,
        mock_signal,
    ):
        app_config = AppConfig(matching=MatchingConfig(schedule_interval="30m"))
        mock_load.return_value = (app_config, _env_config(log_level="INFO"))
        mock_app_cls.return_value.app_config = app_config
        scheduler = Mock()

        def build_scheduler(**kwargs):
            # stop immediately once the service starts
            scheduler.start.side_effect = kwargs["shutdown_event"].set
            return scheduler

        mock_scheduler_cls.side_effect = build_scheduler

        assert main(["serve"]) == 0

        kwargs = mock_scheduler_cls.call_args.kwargs
        assert kwargs["interval_seconds"] == 1800
        kwargs["run_callable"]()
        mock_app_cls.return_value.pipeline.run_once.assert_called_once_with(wait=False)
        assert isinstance(kwargs["shutdown_event"], threading.Event)
        scheduler.start.assert_called_once()
        scheduler.get_next_run_time.assert_called_once()
        assert mock_signal.call_count == 2


@patch("jobmatch.main.configure_logging")
@patch("jobmatch.main.load_runtime_config")
@patch("jobmatch.main.GoogleAIClient")
def test_add_user_end_to_end(mock_client_cls, mock_load, mock_logging, capsys):
    mock_client_cls.return_value = FakeEmbedder({"python": [1.0, 0.0]})
    mock_load.return_value = (AppConfig(), _env_config(log_level="INFO"))

    exit_code = main(
        ["add-user", "--first-name", "Ada", "--last-name", "Lovelace", "--username", "ada",
         "--email", "Ada@Example.com", "--skills", "Python"]
    )

    assert exit_code == 0
    user = json.loads(capsys.readouterr().out)
    assert user["email"] == "ada@example.com"
    assert user["skills"] == ["python"]
    assert user["has_embeddings"] is True
    assert user["user_type"] == "candidate"
    assert datetime.fromisoformat(user["created_at"].replace("Z", "+00:00")) <= datetime.now(
        timezone.utc
    )
