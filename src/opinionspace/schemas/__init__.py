"""Pydantic schemas for simulation snapshots and spatial projections."""

from .simulation import (
    BehavioralAction,
    ClusterDefinition,
    PanelAgent,
    PublicExpression,
    ReactionResult,
    ReactionTurn,
    Simulation,
    TrueBelief,
)
from .spatial import (
    AgentSample,
    ClusterAnalysis,
    ClusterSummary,
    OpinionBridge,
    Position,
    SpatialDataResponse,
    SpatialMetadata,
)

__all__ = [
    "AgentSample",
    "BehavioralAction",
    "ClusterAnalysis",
    "ClusterDefinition",
    "ClusterSummary",
    "OpinionBridge",
    "PanelAgent",
    "Position",
    "PublicExpression",
    "ReactionResult",
    "ReactionTurn",
    "Simulation",
    "SpatialDataResponse",
    "SpatialMetadata",
    "TrueBelief",
]
