"""Cosine similarity between embedding vectors."""

from typing import Sequence

import numpy as np

from jobmatch.domain.exceptions import ComputationError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute the cosine of the angle between two vectors.

    Args:
        a: First vector
        b: Second vector, same length as a

    Returns:
        Similarity in [-1.0, 1.0]

    Raises:
        ComputationError: If the vectors differ in length, are empty, or
            either has zero magnitude
    """
    left = np.asarray(a, dtype=float)
    right = np.asarray(b, dtype=float)

    if left.ndim != 1 or right.ndim != 1:
        raise ComputationError("Cosine similarity requires one-dimensional vectors")
    if left.shape != right.shape:
        raise ComputationError(
            f"Vector length mismatch: {left.shape[0]} vs {right.shape[0]}"
        )
    if left.size == 0:
        raise ComputationError("Cosine similarity of empty vectors is undefined")

    norm_product = float(np.linalg.norm(left) * np.linalg.norm(right))
    if norm_product == 0.0 or not np.isfinite(norm_product):
        raise ComputationError("Cosine similarity is undefined for zero-magnitude vectors")

    similarity = float(np.dot(left, right)) / norm_product
    # Rounding can push identical vectors a hair past 1.0.
    return max(-1.0, min(1.0, similarity))
