"""Result structures produced by a matching pass.

Nothing here is persisted: a MatchReport lives only for the duration of one
pass and is rebuilt from scratch every time the matcher runs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class SimilarityResult:
    """Similarity between one user's skills and one job's categories.

    Attributes:
        user_id: Matched user's identifier
        user_name: Matched user's display name
        email: Matched user's email address (notification recipient)
        job_id: Job identifier
        job_title: Job title
        matched_skills: Number of (skill, category) vector pairs at or above the threshold
        max_similarity: Highest similarity seen across all compared vector pairs
    """

    user_id: str
    user_name: str
    email: str
    job_id: str
    job_title: str
    matched_skills: int
    max_similarity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "email": self.email,
            "jobId": self.job_id,
            "jobTitle": self.job_title,
            "matchedSkills": self.matched_skills,
            "maxSimilarity": self.max_similarity,
        }


@dataclass
class MatchReport:
    """Output of SimilarityMatcher.find_similarity().

    Attributes:
        total_comparisons: Number of vector pairs actually compared
        top_matches_per_user: Best result for each user, highest similarity first
        all_similarities: Every qualifying (user, job) result, highest similarity first
    """

    total_comparisons: int = 0
    top_matches_per_user: List[SimilarityResult] = field(default_factory=list)
    all_similarities: List[SimilarityResult] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.all_similarities

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalComparisons": self.total_comparisons,
            "topMatchesPerUser": [result.to_dict() for result in self.top_matches_per_user],
            "allSimilarities": [result.to_dict() for result in self.all_similarities],
        }
