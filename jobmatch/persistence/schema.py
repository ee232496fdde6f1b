"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the users and jobs tables and
conversion methods between ORM rows and domain models. Skills, categories and
embeddings are stored as JSON; embeddings are normalized into the
SingleEmbedding / MultiEmbedding variant when a row is loaded.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, Index, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from jobmatch.domain.models import Job, User, embedding_to_raw

logger = logging.getLogger(__name__)

Base = declarative_base()


class UserModel(Base):
    """ORM model for the users table."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    username = Column(String(100), nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    user_type = Column(String(20), nullable=False, default="candidate")
    skills = Column(JSON, nullable=False, default=list)
    embeddings = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_users_created_at", "created_at"),)

    def to_domain(self) -> User:
        """Convert ORM row to a User domain model."""
        return User(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            email=self.email,
            user_type=self.user_type,
            skills=list(self.skills or []),
            embeddings=self.embeddings,
            created_at=_as_utc(self.created_at),
        )

    @classmethod
    def from_domain(cls, user: User) -> "UserModel":
        """Create ORM row from a User domain model."""
        model = cls(id=user.id, created_at=user.created_at)
        model.apply(user)
        return model

    def apply(self, user: User) -> None:
        """Copy mutable fields from a User onto this row."""
        self.first_name = user.first_name
        self.last_name = user.last_name
        self.username = user.username
        self.email = user.email
        self.user_type = user.user_type.value
        self.skills = list(user.skills)
        self.embeddings = embedding_to_raw(user.embeddings)


class JobModel(Base):
    """ORM model for the jobs table."""

    __tablename__ = "jobs"

    id = Column(String(32), primary_key=True, nullable=False)
    title = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    categories = Column(JSON, nullable=False, default=list)
    embeddings = Column(JSON, nullable=True)
    posted_by = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_jobs_created_at", "created_at"),
        Index("idx_jobs_posted_by", "posted_by"),
    )

    def to_domain(self) -> Job:
        """Convert ORM row to a Job domain model."""
        return Job(
            id=self.id,
            title=self.title,
            description=self.description,
            categories=list(self.categories or []),
            embeddings=self.embeddings,
            posted_by=self.posted_by,
            created_at=_as_utc(self.created_at),
            closed_at=_as_utc(self.closed_at),
        )

    @classmethod
    def from_domain(cls, job: Job) -> "JobModel":
        """Create ORM row from a Job domain model."""
        model = cls(id=job.id, created_at=job.created_at)
        model.apply(job)
        return model

    def apply(self, job: Job) -> None:
        """Copy mutable fields from a Job onto this row."""
        self.title = job.title
        self.description = job.description
        self.categories = list(job.categories)
        self.embeddings = embedding_to_raw(job.embeddings)
        self.posted_by = job.posted_by
        self.closed_at = job.closed_at


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo on the way back; treat naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
