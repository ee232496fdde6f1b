"""Embedding similarity matching between users and jobs.

This module provides:
- SimilarityMatcher: pairs every user with every job by cosine similarity
- SimilarityResult: one qualifying (user, job) pair
- MatchReport: ranked output of a matching pass
- cosine_similarity: the underlying vector comparison
"""

from .engine import DEFAULT_THRESHOLD, SimilarityMatcher
from .models import MatchReport, SimilarityResult
from .similarity import cosine_similarity

__all__ = [
    "SimilarityMatcher",
    "SimilarityResult",
    "MatchReport",
    "cosine_similarity",
    "DEFAULT_THRESHOLD",
]
