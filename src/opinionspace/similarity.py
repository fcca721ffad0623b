"""Pairwise similarity between cluster summaries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from .schemas.spatial import ClusterSummary

SCORE_WEIGHT = 0.5
KEYWORD_WEIGHT = 0.3
EMOTION_WEIGHT = 0.2
EMOTION_MISMATCH = 0.3


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    """Intersection over union; 0 when both sides are empty."""
    left_set, right_set = set(left), set(right)
    union = len(left_set | right_set)
    if union == 0:
        return 0.0
    return len(left_set & right_set) / union


def cluster_similarity(a: ClusterSummary, b: ClusterSummary) -> float:
    """Symmetric score in [0, 1] mixing stance, vocabulary and mood.

    A cluster is always fully similar to itself, even without keywords.
    """
    if a is b or a == b:
        return 1.0
    score_similarity = 1 - abs(a.avg_score - b.avg_score) / 100
    keyword_similarity = jaccard(a.keywords, b.keywords)
    emotion_similarity = 1.0 if a.dominant_emotion == b.dominant_emotion else EMOTION_MISMATCH
    return (
        score_similarity * SCORE_WEIGHT
        + keyword_similarity * KEYWORD_WEIGHT
        + emotion_similarity * EMOTION_WEIGHT
    )


def similarity_matrix(clusters: Sequence[ClusterSummary]) -> np.ndarray:
    """Dense N x N matrix with ones on the diagonal."""
    n = len(clusters)
    matrix = np.ones((n, n), dtype=float)
    for i in range(n):
        for j in range(i + 1, n):
            value = cluster_similarity(clusters[i], clusters[j])
            matrix[i, j] = value
            matrix[j, i] = value
    return matrix
