"""Core domain models for users, jobs, and their embeddings.

This module defines the data structures used throughout the application:
- SingleEmbedding / MultiEmbedding: the two shapes a stored embedding can take
- User: a registered person with skills and skill embeddings
- Job: a job posting with categories and category embeddings

Raw embedding values coming out of storage are normalized into the tagged
variant by ``embedding_from_raw`` so downstream code never has to inspect the
shape of a nested list.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from numbers import Real
from typing import Any, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Vector = Tuple[float, ...]


@dataclass(frozen=True)
class SingleEmbedding:
    """A single embedding vector stored for an entity."""

    vector: Vector

    @property
    def vectors(self) -> List[Vector]:
        return [self.vector]

    def to_raw(self) -> List[float]:
        return list(self.vector)


@dataclass(frozen=True)
class MultiEmbedding:
    """One embedding vector per skill or category."""

    items: Tuple[Vector, ...]

    @property
    def vectors(self) -> List[Vector]:
        return list(self.items)

    def to_raw(self) -> List[List[float]]:
        return [list(vector) for vector in self.items]


EmbeddingSet = Union[SingleEmbedding, MultiEmbedding]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def embedding_from_raw(raw: Any) -> Optional[EmbeddingSet]:
    """Normalize a stored embedding value into an EmbeddingSet.

    Accepted shapes:
    - None or an empty list: no embeddings
    - a flat list of numbers: SingleEmbedding
    - a list of lists of numbers: MultiEmbedding (empty inner lists are dropped)
    - an existing SingleEmbedding / MultiEmbedding: returned unchanged

    Args:
        raw: Value as stored in the database or returned by a provider

    Returns:
        EmbeddingSet, or None if there is nothing to compare

    Raises:
        ValueError: If the value is neither a vector nor a list of vectors
    """
    if raw is None:
        return None
    if isinstance(raw, (SingleEmbedding, MultiEmbedding)):
        return raw
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"Embeddings must be a list, got {type(raw).__name__}")
    if not raw:
        return None

    if all(_is_number(value) for value in raw):
        return SingleEmbedding(vector=tuple(float(value) for value in raw))

    vectors = []
    for index, item in enumerate(raw):
        if not isinstance(item, (list, tuple)) or not all(_is_number(v) for v in item):
            raise ValueError(f"Embedding entry {index} is not a numeric vector")
        if item:
            vectors.append(tuple(float(v) for v in item))

    if not vectors:
        return None
    return MultiEmbedding(items=tuple(vectors))


def embedding_to_raw(embeddings: Optional[EmbeddingSet]) -> Optional[list]:
    """Convert an EmbeddingSet back to plain lists for JSON storage."""
    if embeddings is None:
        return None
    return embeddings.to_raw()


def _utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class UserType(str, Enum):
    """Kinds of registered users."""

    CANDIDATE = "candidate"
    EMPLOYER = "employer"


class User(BaseModel):
    """A registered user with skills and optional skill embeddings."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique user identifier")
    first_name: str
    last_name: str
    username: str
    email: str
    user_type: UserType = UserType.CANDIDATE
    skills: List[str] = Field(default_factory=list)
    embeddings: Optional[EmbeddingSet] = None
    created_at: datetime

    @field_validator("embeddings", mode="before")
    @classmethod
    def normalize_embeddings(cls, v: Any) -> Optional[EmbeddingSet]:
        """Accept raw nested lists as well as EmbeddingSet values."""
        return embedding_from_raw(v)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _utc(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_embeddings(self) -> bool:
        return self.embeddings is not None


class Job(BaseModel):
    """A job posting with categories and optional category embeddings."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique job identifier")
    title: str
    description: str
    categories: List[str] = Field(default_factory=list)
    embeddings: Optional[EmbeddingSet] = None
    posted_by: Optional[str] = None
    created_at: datetime
    closed_at: Optional[datetime] = None

    @field_validator("embeddings", mode="before")
    @classmethod
    def normalize_embeddings(cls, v: Any) -> Optional[EmbeddingSet]:
        return embedding_from_raw(v)

    @field_validator("created_at", "closed_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _utc(v)

    @property
    def has_embeddings(self) -> bool:
        return self.embeddings is not None


def lowercase_terms(terms: Sequence[str]) -> List[str]:
    """Lowercase and strip skill/category strings, dropping blanks."""
    cleaned = []
    for term in terms:
        stripped = term.strip().lower()
        if stripped:
            cleaned.append(stripped)
    return cleaned
