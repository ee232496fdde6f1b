"""Process-wide SQLAlchemy engine and transactional sessions.

init_database() builds the engine once at startup and creates the tables;
get_session() hands out commit-or-rollback scopes afterwards.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from jobmatch.logging import get_logger

from .exceptions import DatabaseConnectionError

DEFAULT_DATABASE_URL = "sqlite:///./data/jobmatch.db"

_engine: Engine | None = None
_session_factory: sessionmaker | None = None

logger = get_logger(__name__, component="database")


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _engine_options(url: URL) -> Dict[str, Any]:
    options: Dict[str, Any] = {"pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        return options

    options["connect_args"] = {"check_same_thread": False, "timeout": 30}
    if _is_memory_sqlite(url):
        # One shared connection, otherwise each session gets an empty database
        options["poolclass"] = StaticPool
    else:
        directory = Path(url.database).parent
        if not directory.exists():
            logger.info(f"Creating database directory: {directory}")
            directory.mkdir(parents=True, exist_ok=True)
    return options


def _install_sqlite_pragmas(engine: Engine, wal: bool) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def _display_url(url: URL) -> str:
    return url.render_as_string(hide_password=True)


def init_database(database_url: str = DEFAULT_DATABASE_URL) -> None:
    """Create the engine, check connectivity and create missing tables.

    Args:
        database_url: SQLAlchemy connection URL

    Raises:
        DatabaseConnectionError: If the URL is invalid or the database is unreachable
    """
    global _engine, _session_factory

    if not isinstance(database_url, str) or not database_url:
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    try:
        url = make_url(database_url)
    except ArgumentError as e:
        raise DatabaseConnectionError(f"Invalid database URL: {e}") from e

    logger.info(
        "Initializing database",
        extra={"event": "database.initializing", "database_url": _display_url(url)},
    )

    try:
        engine = create_engine(url, **_engine_options(url))
        if url.get_backend_name() == "sqlite":
            _install_sqlite_pragmas(engine, wal=not _is_memory_sqlite(url))

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        from .schema import create_schema

        create_schema(engine)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise DatabaseConnectionError(f"Failed to initialize database: {e}") from e

    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)
    logger.info(
        "Database ready",
        extra={"event": "database.initialised", "database_url": _display_url(url)},
    )


def _not_initialized(caller: str) -> DatabaseConnectionError:
    return DatabaseConnectionError(
        f"Database not initialized. Call init_database() before using {caller}()"
    )


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Yield a session; commit when the block exits cleanly, roll back otherwise.

    Example:
        >>> with get_session() as session:
        ...     user = UserRepository(session).get_by_email("ada@example.com")
    """
    if _session_factory is None:
        raise _not_initialized("get_session")

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Rolled back database session: {e}",
            extra={"event": "database.session.rolled_back", "error_type": type(e).__name__},
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    if _engine is None:
        raise _not_initialized("get_engine")
    return _engine


def close_database() -> None:
    """Dispose of the engine if one exists."""
    global _engine, _session_factory

    if _engine is None:
        return
    _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connections closed", extra={"event": "database.closed"})
