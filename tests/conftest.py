"""Shared builders for projection tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from opinionspace.schemas.simulation import Simulation
from opinionspace.schemas.spatial import ClusterAnalysis, ClusterSummary

_ANALYSIS = ClusterAnalysis(think="", say="", do="")


@pytest.fixture
def make_summary() -> Callable[..., ClusterSummary]:
    def _make(
        cluster_id: str,
        avg_score: float = 50,
        keywords: list[str] | None = None,
        emotion: str = "neutral",
        name: str | None = None,
    ) -> ClusterSummary:
        return ClusterSummary(
            id=cluster_id,
            name=name or cluster_id.upper(),
            avg_score=avg_score,
            dominant_emotion=emotion,
            keywords=keywords or [],
            analysis=_ANALYSIS,
        )

    return _make


@pytest.fixture
def make_simulation() -> Callable[..., Simulation]:
    def _make(
        clusters: list[dict[str, Any]],
        results: list[dict[str, Any]] | None = None,
        panel: list[dict[str, Any]] | None = None,
        **extra: Any,
    ) -> Simulation:
        payload = {
            "id": "sim-test",
            "title": "Test simulation",
            "scenario": "A new bus corridor downtown.",
            "createdAt": "2024-05-01T10:00:00Z",
            "clustersSnapshot": clusters,
            "panelSnapshot": panel or [],
            "results": results or [],
        }
        payload.update(extra)
        return Simulation.model_validate(payload)

    return _make


def _result_row(
    agent_id: str,
    cluster_id: str,
    score: float | None = None,
    emotion: str | None = None,
    response: str | None = None,
    **turn_fields: Any,
) -> dict[str, Any]:
    turn: dict[str, Any] = dict(turn_fields)
    if score is not None:
        turn["stance_score"] = score
    if emotion is not None:
        turn["emotion"] = emotion
    if response is not None:
        turn["response"] = response
    return {"agentId": agent_id, "clusterId": cluster_id, "turns": [turn]}


@pytest.fixture
def result_row() -> Callable[..., dict[str, Any]]:
    return _result_row
