"""Data access layer (repositories) for users and jobs.

Repositories encapsulate database operations and return domain models rather
than ORM rows. They flush but never commit; the caller's get_session() scope
owns the transaction.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobmatch.domain.models import Job, User

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import JobModel, UserModel

logger = logging.getLogger(__name__)

DomainT = TypeVar("DomainT", User, Job)


class _Repository(Generic[DomainT]):
    """Shared CRUD operations keyed by the entity's string id."""

    model: Type = None
    entity_name: str = "record"

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, entity_id: str) -> Optional[DomainT]:
        """Retrieve an entity by primary key, or None if absent.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            row = self.session.get(self.model, entity_id)
            return row.to_domain() if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.entity_name} {entity_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve {self.entity_name}: {e}") from e

    def list_all(self) -> List[DomainT]:
        """Return every entity, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(self.model).order_by(self.model.created_at.asc(), self.model.id.asc())
            return [row.to_domain() for row in self.session.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error listing {self.entity_name}s: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list {self.entity_name}s: {e}") from e

    def add(self, entity: DomainT) -> DomainT:
        """Insert a new entity.

        Raises:
            DataIntegrityError: If a unique constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            row = self.model.from_domain(entity)
            self.session.add(row)
            self.session.flush()
            return row.to_domain()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Integrity error inserting {self.entity_name} {entity.id}: {e}")
            raise DataIntegrityError(
                f"Failed to insert {self.entity_name} due to constraint violation: {e.orig}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting {self.entity_name} {entity.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert {self.entity_name}: {e}") from e

    def update(self, entity: DomainT) -> DomainT:
        """Overwrite the stored row with the entity's current fields.

        Raises:
            RecordNotFoundError: If no row has the entity's id
            DataIntegrityError: If a unique constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            row = self.session.get(self.model, entity.id)
            if row is None:
                raise RecordNotFoundError(f"{self.entity_name.capitalize()} {entity.id} not found")
            row.apply(entity)
            self.session.flush()
            return row.to_domain()
        except RecordNotFoundError:
            raise
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Integrity error updating {self.entity_name} {entity.id}: {e}")
            raise DataIntegrityError(
                f"Failed to update {self.entity_name} due to constraint violation: {e.orig}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.entity_name} {entity.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update {self.entity_name}: {e}") from e

    def delete(self, entity_id: str) -> DomainT:
        """Delete an entity and return its last state.

        Raises:
            RecordNotFoundError: If no row has this id
            PersistenceError: If database error occurs
        """
        try:
            row = self.session.get(self.model, entity_id)
            if row is None:
                raise RecordNotFoundError(f"{self.entity_name.capitalize()} {entity_id} not found")
            removed = row.to_domain()
            self.session.delete(row)
            self.session.flush()
            return removed
        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.entity_name} {entity_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete {self.entity_name}: {e}") from e


class UserRepository(_Repository[User]):
    """Repository for user records."""

    model = UserModel
    entity_name = "user"

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by email address (case-insensitive), or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(UserModel).where(UserModel.email == email.strip().lower())
            row = self.session.execute(stmt).scalar_one_or_none()
            return row.to_domain() if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e


class JobRepository(_Repository[Job]):
    """Repository for job postings."""

    model = JobModel
    entity_name = "job"

    def get_by_title(self, title: str) -> Optional[Job]:
        """Retrieve a job by exact title, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(JobModel).where(JobModel.title == title)
            row = self.session.execute(stmt).scalar_one_or_none()
            return row.to_domain() if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job by title {title!r}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e
