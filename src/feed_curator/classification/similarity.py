# feed_curator/classification/similarity.py
"""
Similarity utilities - cosine similarity for semantic matching.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def cosine_similarity(v1: Sequence[float] | np.ndarray, v2: Sequence[float] | np.ndarray) -> float:
    """Compute cosine similarity between two vectors.

    Returns 0.0 for empty or zero-norm vectors instead of dividing by zero.
    """
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    if a.size == 0 or b.size == 0:
        return 0.0
    if a.shape != b.shape:
        raise ValueError(f"Embedding dimensions differ: {a.shape} vs {b.shape}")
    norm_product = np.linalg.norm(a) * np.linalg.norm(b)
    if norm_product == 0:
        return 0.0
    return float(np.dot(a, b) / norm_product)


def max_similarity(
    query: Sequence[float] | np.ndarray,
    candidates: Sequence[Sequence[float] | np.ndarray],
) -> float:
    """Highest cosine similarity of ``query`` against any candidate (-1.0 if none)."""
    best = -1.0
    for candidate in candidates:
        sim = cosine_similarity(query, candidate)
        if sim > best:
            best = sim
    return best
