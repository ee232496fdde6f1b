"""Persistence layer for users and jobs.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - UserRepository: CRUD operations for users
    - JobRepository: CRUD operations for jobs

Example usage:
    >>> from jobmatch.persistence import init_database, get_session, UserRepository
    >>> init_database("sqlite:///./data/jobmatch.db")
    >>> with get_session() as session:
    ...     users = UserRepository(session).list_all()
"""

from .database import (
    DEFAULT_DATABASE_URL,
    close_database,
    get_engine,
    get_session,
    init_database,
)
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import JobRepository, UserRepository

__all__ = [
    "DEFAULT_DATABASE_URL",
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "UserRepository",
    "JobRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
