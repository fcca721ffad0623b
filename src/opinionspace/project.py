"""Turn a simulation snapshot into the spatial projection payload."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from loguru import logger

from .aggregate import aggregate_clusters
from .bridges import analyze_bridges
from .config import DEFAULT_SETTINGS, ProjectionSettings
from .layout import attach_positions, compute_positions
from .schemas.simulation import Simulation
from .schemas.spatial import SpatialDataResponse, SpatialMetadata
from .similarity import similarity_matrix


def _metadata(simulation: Simulation, total_clusters: int) -> SpatialMetadata:
    return SpatialMetadata(
        simulation_id=simulation.id,
        title=simulation.title,
        scenario=simulation.scenario,
        total_agents=len(simulation.panel) or len(simulation.results),
        total_clusters=total_clusters,
        created_at=simulation.created_at,
    )


def project_simulation(
    simulation: Simulation,
    settings: Optional[ProjectionSettings] = None,
) -> SpatialDataResponse:
    """Aggregate, lay out and bridge the clusters of one simulation."""
    settings = settings or DEFAULT_SETTINGS
    logger.debug(
        "project:start | simulation={} | clusters={} | results={}",
        simulation.id,
        len(simulation.clusters),
        len(simulation.results),
    )

    summaries = aggregate_clusters(simulation, settings.aggregation)
    similarities = similarity_matrix(summaries)
    positions = compute_positions(summaries, similarities, settings.layout)
    bridges = analyze_bridges(summaries, settings.bridges) if settings.include_bridges else None

    response = SpatialDataResponse(
        metadata=_metadata(simulation, len(summaries)),
        clusters=attach_positions(summaries, positions),
        bridges=bridges,
    )
    logger.info(
        "project:done | simulation={} | clusters={} | bridges={}",
        simulation.id,
        len(response.clusters),
        len(bridges) if bridges is not None else "skipped",
    )
    return response


def project(
    snapshot: Union[Simulation, Mapping[str, Any]],
    settings: Optional[ProjectionSettings] = None,
) -> dict[str, Any]:
    """Entry point for raw snapshots: validate, project, return a JSON-ready dict."""
    simulation = snapshot if isinstance(snapshot, Simulation) else Simulation.model_validate(dict(snapshot))
    return project_simulation(simulation, settings).to_payload()
