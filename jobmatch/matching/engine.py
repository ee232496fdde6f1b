"""Embedding similarity matcher pairing users with jobs.

This module implements the matching logic that:
1. Compares every user's skill vectors with every job's category vectors
2. Counts vector pairs at or above the similarity threshold
3. Ranks qualifying (user, job) pairs and picks each user's best job
"""

import logging
import time
from typing import Dict, List, Optional, Sequence, Tuple

from jobmatch.domain.exceptions import ComputationError
from jobmatch.domain.models import Job, User, Vector
from jobmatch.logging import get_logger

from .models import MatchReport, SimilarityResult
from .similarity import cosine_similarity

logger = get_logger(__name__, component="matching")

DEFAULT_THRESHOLD = 0.8


class SimilarityMatcher:
    """Matches users to jobs by cosine similarity of their embeddings.

    Responsibilities:
    - Skip users and jobs that carry no embeddings
    - Compare only vector pairs of equal length
    - Count sub-pairs meeting the threshold and track the best similarity
    - Sort results and reduce them to one top match per user
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, logger_instance: logging.Logger = None):
        """Initialize SimilarityMatcher.

        Args:
            threshold: Minimum similarity for a vector pair to count as matched
            logger_instance: Optional logger instance (defaults to module logger)

        Raises:
            ValueError: If threshold is outside [-1, 1]
        """
        if not -1.0 <= threshold <= 1.0:
            raise ValueError(f"Similarity threshold must be within [-1, 1], got {threshold}")
        self.threshold = threshold
        self.logger = logger_instance or logger

    def find_similarity(self, users: Sequence[User], jobs: Sequence[Job]) -> MatchReport:
        """Run one matching pass over the given snapshots.

        Algorithm:
        1. Keep only users and jobs that have embeddings
        2. For each (user, job) pair compare every equal-length vector pair
        3. Emit a SimilarityResult when at least one pair meets the threshold
        4. Sort results by max_similarity, highest first (stable)
        5. Keep the first result seen for each user as their top match

        Args:
            users: Users to match (read-only for the duration of the pass)
            jobs: Jobs to match against

        Returns:
            MatchReport; empty when there are no users or no jobs to compare
        """
        started = time.monotonic()
        comparable_users = [user for user in users if user.embeddings is not None]
        comparable_jobs = [job for job in jobs if job.embeddings is not None]

        total_comparisons = 0
        results: List[SimilarityResult] = []

        for user in comparable_users:
            user_vectors = user.embeddings.vectors
            for job in comparable_jobs:
                matched, best, compared = self._compare(user_vectors, job.embeddings.vectors)
                total_comparisons += compared

                if matched > 0:
                    results.append(
                        SimilarityResult(
                            user_id=user.id,
                            user_name=user.full_name or user.username,
                            email=user.email,
                            job_id=job.id,
                            job_title=job.title,
                            matched_skills=matched,
                            max_similarity=best,
                        )
                    )

        results.sort(key=lambda result: result.max_similarity, reverse=True)
        top_matches = self._top_match_per_user(results)

        self.logger.info(
            f"Matching pass compared {len(comparable_users)} users with "
            f"{len(comparable_jobs)} jobs: {len(results)} matches",
            extra={
                "event": "matching.pass.completed",
                "users_total": len(users),
                "users_compared": len(comparable_users),
                "jobs_total": len(jobs),
                "jobs_compared": len(comparable_jobs),
                "total_comparisons": total_comparisons,
                "matches": len(results),
                "matched_users": len(top_matches),
                "threshold": self.threshold,
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )

        return MatchReport(
            total_comparisons=total_comparisons,
            top_matches_per_user=top_matches,
            all_similarities=results,
        )

    def _compare(
        self, user_vectors: List[Vector], job_vectors: List[Vector]
    ) -> Tuple[int, float, int]:
        """Compare two vector sets.

        Returns:
            Tuple of (pairs meeting threshold, best similarity, pairs compared).
            Best similarity is -inf when nothing was comparable.
        """
        matched = 0
        compared = 0
        best = float("-inf")

        for user_vector in user_vectors:
            for job_vector in job_vectors:
                if len(user_vector) != len(job_vector):
                    self.logger.debug(
                        "Skipping vector pair with mismatched dimensions",
                        extra={
                            "event": "matching.pair.skipped",
                            "reason": "dimension_mismatch",
                            "user_dimensions": len(user_vector),
                            "job_dimensions": len(job_vector),
                        },
                    )
                    continue

                similarity = self._safe_similarity(user_vector, job_vector)
                if similarity is None:
                    continue

                compared += 1
                if similarity >= self.threshold:
                    matched += 1
                if similarity > best:
                    best = similarity

        return matched, best, compared

    def _safe_similarity(self, a: Vector, b: Vector) -> Optional[float]:
        try:
            return cosine_similarity(a, b)
        except ComputationError as e:
            self.logger.warning(
                f"Skipping degenerate vector pair: {e}",
                extra={"event": "matching.pair.skipped", "reason": "degenerate_vector"},
            )
            return None

    @staticmethod
    def _top_match_per_user(results: List[SimilarityResult]) -> List[SimilarityResult]:
        """Keep the first result for each user from an already sorted list."""
        best_by_user: Dict[str, SimilarityResult] = {}
        for result in results:
            if result.user_id not in best_by_user:
                best_by_user[result.user_id] = result
        return list(best_by_user.values())
