"""Pipeline orchestration for loading, matching and notifying."""

from .models import MatchRunResult
from .runner import MatchingPipeline

__all__ = [
    "MatchingPipeline",
    "MatchRunResult",
]
