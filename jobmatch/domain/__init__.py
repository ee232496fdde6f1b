"""Domain models and error taxonomy for the job matching service."""

from .exceptions import (
    ComputationError,
    JobMatchError,
    NotFoundError,
    ProviderError,
    ValidationError,
)
from .models import (
    EmbeddingSet,
    Job,
    MultiEmbedding,
    SingleEmbedding,
    User,
    UserType,
    embedding_from_raw,
    embedding_to_raw,
    lowercase_terms,
)

__all__ = [
    "User",
    "UserType",
    "Job",
    "EmbeddingSet",
    "SingleEmbedding",
    "MultiEmbedding",
    "embedding_from_raw",
    "embedding_to_raw",
    "lowercase_terms",
    "JobMatchError",
    "ValidationError",
    "NotFoundError",
    "ProviderError",
    "ComputationError",
]
