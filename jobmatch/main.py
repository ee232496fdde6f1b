"""Main entry point for the job matching service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import functools
import json
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jobmatch.ai.google import GoogleAIClient
from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.exceptions import ConfigurationError
from jobmatch.config.loader import load_config
from jobmatch.config.models import AppConfig
from jobmatch.domain.exceptions import JobMatchError
from jobmatch.domain.models import Job, User
from jobmatch.logging import get_logger
from jobmatch.logging.config import configure_logging
from jobmatch.matching.engine import SimilarityMatcher
from jobmatch.notifications.service import NotificationDispatcher
from jobmatch.persistence.database import close_database, init_database
from jobmatch.persistence.exceptions import PersistenceError
from jobmatch.pipeline import MatchingPipeline
from jobmatch.scheduler import SchedulerService
from jobmatch.services import JobService, UserService

logger = get_logger(__name__, component="cli")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Application:
    """Wires configuration into the services, pipeline and dispatcher."""

    def __init__(self, app_config: AppConfig, env_config: EnvironmentConfig):
        self.app_config = app_config
        self.env_config = env_config

        ai_client = GoogleAIClient(app_config.ai, env_config.ai_api_key)
        self.pipeline = MatchingPipeline(
            matcher=SimilarityMatcher(threshold=app_config.matching.threshold),
            dispatcher=NotificationDispatcher(
                suggestion_provider=ai_client,
                env_config=env_config,
                email_config=app_config.email,
            ),
        )
        self.users = UserService(embedder=ai_client)
        self.jobs = JobService(
            embedder=ai_client,
            on_job_created=self._match_after_create if app_config.matching.run_on_job_create else None,
        )

    def _match_after_create(self, job: Job) -> None:
        logger.info(
            f"Running matching pass after creating job '{job.title}'",
            extra={"event": "job.created.matching"},
        )
        self.pipeline.run_once()


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobmatch",
        description="Job matching service - embedding similarity matching and candidate notifications",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Log level (overrides config and environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("serve", help="Run matching passes on the configured interval")
    commands.add_parser("match", help="Run one matching pass and print the report")

    add_user = commands.add_parser("add-user", help="Register a user")
    add_user.add_argument("--first-name", required=True)
    add_user.add_argument("--last-name", required=True)
    add_user.add_argument("--username", required=True)
    add_user.add_argument("--email", required=True)
    add_user.add_argument("--user-type", choices=["candidate", "employer"], default="candidate")
    add_user.add_argument("--skills", nargs="*", default=None, help="Skill names")

    add_job = commands.add_parser("add-job", help="Post a job")
    add_job.add_argument("--title", required=True)
    add_job.add_argument("--description", required=True)
    add_job.add_argument("--categories", nargs="+", required=True, help="Category names")
    add_job.add_argument("--posted-by", required=True, help="Id of the posting user")

    commands.add_parser("list-users", help="Print stored users as JSON")
    commands.add_parser("list-jobs", help="Print stored jobs as JSON")
    return parser


def entity_to_dict(entity: Any) -> Dict[str, Any]:
    """JSON-friendly view of a User or Job without the raw vectors."""
    data = entity.model_dump(mode="json", exclude={"embeddings"})
    data["has_embeddings"] = entity.has_embeddings
    return data


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def run_serve(app: Application, start_time: float) -> int:
    shutdown_event = threading.Event()
    scheduler_service = SchedulerService(
        run_callable=functools.partial(app.pipeline.run_once, wait=False),
        interval_seconds=app.app_config.matching.schedule_interval_seconds,
        shutdown_event=shutdown_event,
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        scheduler_service.shutdown(wait=False)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    scheduler_service.start()
    logger.info(
        f"Scheduler started, next pass at {scheduler_service.get_next_run_time()}. Press Ctrl+C to stop",
        extra={"event": "service.daemon_mode.started"},
    )

    try:
        shutdown_event.wait()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, shutting down", extra={"event": "service.keyboard_interrupt"})
        scheduler_service.shutdown(wait=False)

    logger.info(
        "Job matching service stopped",
        extra={"event": "service.stopping", "uptime_seconds": round(time.time() - start_time, 2)},
    )
    return 0


def run_match(app: Application) -> int:
    result = app.pipeline.run_once()
    logger.info(
        f"Matching pass completed: {len(result.report.all_similarities)} matches, "
        f"{result.emails_sent} emails sent",
        extra={
            "event": "service.match.completed",
            "duration_seconds": result.total_duration_seconds,
            "total_comparisons": result.report.total_comparisons,
        },
    )
    _print_json(result.report.to_dict())
    return 0


def run_command(args: argparse.Namespace, app: Application, start_time: float) -> int:
    if args.command == "serve":
        return run_serve(app, start_time)
    if args.command == "match":
        return run_match(app)
    if args.command == "add-user":
        user = app.users.create_user(
            {
                "first_name": args.first_name,
                "last_name": args.last_name,
                "username": args.username,
                "email": args.email,
                "user_type": args.user_type,
                "skills": args.skills,
            }
        )
        _print_json(entity_to_dict(user))
        return 0
    if args.command == "add-job":
        job = app.jobs.create_job(
            {
                "title": args.title,
                "description": args.description,
                "categories": args.categories,
                "posted_by": args.posted_by,
            }
        )
        _print_json(entity_to_dict(job))
        return 0
    if args.command == "list-users":
        users: List[User] = app.users.list_users()
        _print_json([entity_to_dict(user) for user in users])
        return 0
    if args.command == "list-jobs":
        jobs: List[Job] = app.jobs.list_jobs()
        _print_json([entity_to_dict(job) for job in jobs])
        return 0
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the job matching service.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Job matching service starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
            },
        )

        init_database(env_config.database_url)
        app = Application(app_config, env_config)

        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "threshold": app_config.matching.threshold,
                "schedule_interval_seconds": app_config.matching.schedule_interval_seconds,
                "run_on_job_create": app_config.matching.run_on_job_create,
            },
        )

        try:
            return run_command(args, app, start_time)
        finally:
            close_database()

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except (JobMatchError, PersistenceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Command '{args.command}' failed: {e}",
            extra={"event": "service.command.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            exc_info=True,
            extra={"event": "service.fatal", "error_type": type(e).__name__, "error": str(e)},
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
