"""Force-directed placement of clusters in 3-D opinion space.

Clusters start evenly spaced on a circle in the X-Z plane, with height set
by their average score. Each round, every pair of clusters is pulled toward
an ideal distance derived from their similarity (near-identical clusters aim
for 2 units apart, unrelated ones for 10) and pushed apart when closer than
the minimum distance. Only X and Z move; height never changes. The step size
shrinks linearly every round and the result is centred on the X-Z origin.

The whole computation is a deterministic function of the summaries, the
similarity matrix and the settings: positions live in a single ``(n, 3)``
array indexed like the input list.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from itertools import combinations
from typing import Optional

import numpy as np
from loguru import logger

from .config import LayoutSettings
from .schemas.spatial import ClusterSummary, Position
from .similarity import similarity_matrix

X, Y, Z = 0, 1, 2


def initial_positions(clusters: Sequence[ClusterSummary], settings: Optional[LayoutSettings] = None) -> np.ndarray:
    """Circle in the X-Z plane; height from the average score."""
    settings = settings or LayoutSettings()
    n = len(clusters)
    positions = np.zeros((n, 3), dtype=float)
    for i, cluster in enumerate(clusters):
        angle = (i / n) * 2 * math.pi
        positions[i, X] = math.cos(angle) * settings.radius
        positions[i, Y] = (cluster.avg_score - 50) / settings.height_scale
        positions[i, Z] = math.sin(angle) * settings.radius
    return positions


def ideal_distance(similarity: float, settings: Optional[LayoutSettings] = None) -> float:
    settings = settings or LayoutSettings()
    return (1 - similarity) * settings.distance_span + settings.base_distance


def _relax(positions: np.ndarray, similarities: np.ndarray, settings: LayoutSettings) -> None:
    n = len(positions)
    for iteration in range(settings.iterations):
        forces = np.zeros((n, 2), dtype=float)

        for i, j in combinations(range(n), 2):
            dx = positions[j, X] - positions[i, X]
            dy = positions[j, Y] - positions[i, Y]
            dz = positions[j, Z] - positions[i, Z]
            distance = math.sqrt(dx * dx + dy * dy + dz * dz) or settings.zero_distance

            nx = dx / distance
            nz = dz / distance
            magnitude = (distance - ideal_distance(similarities[i, j], settings)) * settings.spring

            forces[i, 0] += nx * magnitude
            forces[i, 1] += nz * magnitude
            forces[j, 0] -= nx * magnitude
            forces[j, 1] -= nz * magnitude

            if distance < settings.min_distance:
                push = settings.repulsion / (distance * distance)
                forces[i, 0] -= nx * push
                forces[i, 1] -= nz * push
                forces[j, 0] += nx * push
                forces[j, 1] += nz * push

        damping = settings.initial_damping * (1 - iteration / settings.iterations)
        positions[:, X] += forces[:, 0] * damping
        positions[:, Z] += forces[:, 1] * damping
        logger.trace("layout:round | index={} | damping={:.4f}", iteration, damping)


def _center(positions: np.ndarray) -> None:
    n = len(positions)
    center_x = sum(float(value) for value in positions[:, X]) / n
    center_z = sum(float(value) for value in positions[:, Z]) / n
    positions[:, X] -= center_x
    positions[:, Z] -= center_z


def compute_positions(
    clusters: Sequence[ClusterSummary],
    similarities: Optional[np.ndarray] = None,
    settings: Optional[LayoutSettings] = None,
) -> list[Position]:
    """Place clusters so that more similar clusters sit closer together."""
    settings = settings or LayoutSettings()
    n = len(clusters)
    if n == 0:
        return []
    if n == 1:
        return [Position(x=0.0, y=0.0, z=0.0)]

    if similarities is None:
        similarities = similarity_matrix(clusters)
    similarities = np.asarray(similarities, dtype=float)
    if similarities.shape != (n, n):
        raise ValueError(f"similarity matrix shape {similarities.shape} does not match {n} clusters")

    logger.debug("layout:start | clusters={} | iterations={}", n, settings.iterations)
    positions = initial_positions(clusters, settings)
    _relax(positions, similarities, settings)
    _center(positions)

    spread = float(np.max(np.hypot(positions[:, X], positions[:, Z])))
    logger.debug("layout:done | clusters={} | spread={:.3f}", n, spread)
    return [Position(x=float(row[X]), y=float(row[Y]), z=float(row[Z])) for row in positions]


def attach_positions(clusters: Sequence[ClusterSummary], positions: Sequence[Position]) -> list[ClusterSummary]:
    """Copies of the summaries with their layout position filled in."""
    placed = []
    for index, cluster in enumerate(clusters):
        position = positions[index] if index < len(positions) else Position()
        placed.append(cluster.model_copy(update={"position": position}))
    return placed
