"""Schemas for the spatial projection returned by the engine."""

from __future__ import annotations

from typing import Any, Literal, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field

BridgeType = Literal["strong", "moderate", "weak"]


class _ProjectionModel(BaseModel):
    """Immutable output record serialised with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Position(_ProjectionModel):
    """Point in the 3-D opinion space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class AgentSample(_ProjectionModel):
    """Representative agent-level reaction."""

    id: str = Field(..., description="Agent identifier.")
    name: str = Field(..., description="Display name.")
    score: float = Field(default=0, description="Stance score of the first turn.")
    emotion: str = Field(default="neutral", description="Emotion of the first turn.")
    response: str = Field(default="", description="Response text of the first turn.")


class ClusterAnalysis(_ProjectionModel):
    """Narratives for what a cluster thinks, says and does."""

    think: str
    say: str
    do: str


class ClusterSummary(_ProjectionModel):
    """Statistical summary of one cluster, optionally positioned."""

    id: str
    name: str
    description: str = ""
    weight: float = 0
    agent_count: int = Field(default=0, alias="agentCount")
    avg_score: float = Field(default=50, alias="avgScore", ge=0, le=100)
    sentiment: float = Field(default=0, ge=-1, le=1)
    cohesion: int = Field(default=0, ge=0, le=100)
    dominant_emotion: str = Field(default="neutral", alias="dominantEmotion")
    keywords: list[str] = Field(default_factory=list)
    agent_samples: list[AgentSample] = Field(default_factory=list, alias="agentSamples")
    verbatims: list[str] = Field(default_factory=list)
    analysis: ClusterAnalysis
    position: Optional[Position] = None


class OpinionBridge(_ProjectionModel):
    """Persuadability link between two clusters."""

    source_id: str = Field(..., alias="sourceId")
    target_id: str = Field(..., alias="targetId")
    strength: float = Field(..., ge=0, le=1)
    shared_keywords: list[str] = Field(default_factory=list, alias="sharedKeywords")
    shared_emotions: list[str] = Field(default_factory=list, alias="sharedEmotions")
    score_difference: float = Field(..., alias="scoreDifference", ge=0)
    bridge_type: BridgeType = Field(..., alias="bridgeType")
    persuasion_vector: str = Field(..., alias="persuasionVector")


class SpatialMetadata(_ProjectionModel):
    """Simulation-level identity and counts."""

    simulation_id: str = Field(..., alias="simulationId")
    title: str = ""
    scenario: str = ""
    total_agents: int = Field(default=0, alias="totalAgents")
    total_clusters: int = Field(default=0, alias="totalClusters")
    created_at: str = Field(default="", alias="createdAt")


class SpatialDataResponse(_ProjectionModel):
    """Full projection: metadata, positioned clusters and bridges."""

    metadata: SpatialMetadata
    clusters: list[ClusterSummary] = Field(default_factory=list)
    bridges: Optional[list[OpinionBridge]] = None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready mapping; ``bridges`` is left out when not computed."""
        exclude = {"bridges"} if self.bridges is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)

    def to_json(self, *, indent: bool = False) -> bytes:
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(self.to_payload(), option=option)
