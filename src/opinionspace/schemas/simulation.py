"""Schemas for simulation snapshots consumed by the projection engine."""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def numeric_or_none(value: Any) -> Optional[float]:
    """Keep finite numbers, map anything else to None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


class _SnapshotModel(BaseModel):
    """Base for upstream records: tolerant of extra persona fields."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class TrueBelief(_SnapshotModel):
    """What the agent privately thinks."""

    inner_stance_score: Optional[float] = Field(default=None, ge=0, le=100, description="Private stance, 0-100.")

    @field_validator("inner_stance_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Optional[float]:
        return numeric_or_none(value)


class PublicExpression(_SnapshotModel):
    """What the agent says in public."""

    expressed_stance_score: Optional[float] = Field(default=None, ge=0, le=100, description="Voiced stance, 0-100.")

    @field_validator("expressed_stance_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Optional[float]:
        return numeric_or_none(value)


class BehavioralAction(_SnapshotModel):
    """What the agent is predicted to do."""

    action_type: Optional[str] = Field(default=None, description="Predicted action label.")
    action_intensity: Optional[float] = Field(default=None, ge=0, le=100, description="Action intensity, 0-100.")

    @field_validator("action_intensity", mode="before")
    @classmethod
    def _coerce_intensity(cls, value: Any) -> Optional[float]:
        return numeric_or_none(value)


class ReactionTurn(_SnapshotModel):
    """One turn of an agent reaction. Every field may be missing."""

    stance_score: Optional[float] = Field(default=None, ge=0, le=100, description="Stance score, 0-100.")
    emotion: Optional[str] = Field(default=None, description="Emotion label.")
    response: Optional[str] = Field(default=None, description="Free-text reaction.")
    true_belief: Optional[TrueBelief] = None
    public_expression: Optional[PublicExpression] = None
    behavioral_action: Optional[BehavioralAction] = None

    @field_validator("stance_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Optional[float]:
        return numeric_or_none(value)


class ReactionResult(_SnapshotModel):
    """All turns produced by one agent."""

    agent_id: str = Field(..., alias="agentId", description="Agent identifier.")
    cluster_id: str = Field(..., alias="clusterId", description="Cluster the agent belongs to.")
    turns: list[ReactionTurn] = Field(default_factory=list, description="Turns in order.")

    @property
    def first_turn(self) -> Optional[ReactionTurn]:
        return self.turns[0] if self.turns else None


class ClusterDefinition(_SnapshotModel):
    """Cluster identity as configured when the simulation ran."""

    id: str = Field(..., description="Cluster identifier.")
    name: str = Field(..., description="Display name.")
    description: str = Field(default="", alias="description_prompt", description="Persona prompt.")
    weight: float = Field(default=0, description="Configured share of the population, 0-100.")

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> str:
        return value or ""

    @field_validator("weight", mode="before")
    @classmethod
    def _coerce_weight(cls, value: Any) -> float:
        return numeric_or_none(value) or 0.0


class PanelAgent(_SnapshotModel):
    """Membership record linking an agent to its cluster."""

    id: str = Field(..., description="Agent identifier.")
    cluster_id: str = Field(..., description="Cluster identifier.")
    name: Optional[str] = Field(default=None, description="Display name.")
    agent_number: Optional[int] = Field(default=None, alias="agentNumber", description="Ordinal within the panel.")


class Simulation(_SnapshotModel):
    """Immutable snapshot of a finished simulation."""

    id: str = Field(..., description="Simulation identifier.")
    title: str = Field(default="", description="Simulation title.")
    scenario: str = Field(default="", description="Scenario text shown to agents.")
    created_at: str = Field(default="", alias="createdAt", description="Creation timestamp.")
    clusters: list[ClusterDefinition] = Field(default_factory=list, alias="clustersSnapshot")
    panel: list[PanelAgent] = Field(default_factory=list, alias="panelSnapshot")
    results: list[ReactionResult] = Field(default_factory=list)
