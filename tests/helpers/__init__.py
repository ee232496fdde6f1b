"""Test doubles and entity factories shared across test modules."""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from jobmatch.ai.base import EmbeddingProvider, SuggestionProvider
from jobmatch.domain.models import Job, User

NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


class FakeEmbedder(EmbeddingProvider):
    """Deterministic embedder: known terms map to fixed vectors.

    Unknown terms map to a vector derived from their length so that every
    input still yields a non-zero vector.
    """

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None):
        self.vectors = vectors or {}
        self.calls: List[List[str]] = []

    def embed(self, texts: List[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        return [self.vectors.get(text, [float(len(text)), 1.0, 0.0]) for text in texts]


class FakeSuggester(SuggestionProvider):
    def __init__(self, text: str = "Build a portfolio project."):
        self.text = text
        self.calls: List[str] = []

    def suggest_improvements(self, job_title: str) -> str:
        self.calls.append(job_title)
        return f"{self.text} ({job_title})"


def make_user(user_id: str, embeddings=None, **overrides) -> User:
    fields = {
        "id": user_id,
        "first_name": f"First{user_id}",
        "last_name": f"Last{user_id}",
        "username": f"user{user_id}",
        "email": f"{user_id}@example.com",
        "skills": [],
        "embeddings": embeddings,
        "created_at": NOW,
    }
    fields.update(overrides)
    return User(**fields)


def make_job(job_id: str, embeddings=None, **overrides) -> Job:
    fields = {
        "id": job_id,
        "title": f"Job {job_id}",
        "description": "A sufficiently long job description",
        "categories": [],
        "embeddings": embeddings,
        "created_at": NOW,
    }
    fields.update(overrides)
    return Job(**fields)
