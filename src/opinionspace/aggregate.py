"""Reduce per-agent reactions into one statistical summary per cluster."""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import NamedTuple, Optional

import numpy as np
from loguru import logger

from .config import AggregationSettings
from .schemas.simulation import ClusterDefinition, PanelAgent, ReactionResult, ReactionTurn, Simulation
from .schemas.spatial import AgentSample, ClusterAnalysis, ClusterSummary

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


class _Narrative(NamedTuple):
    record: str
    field: str
    label: str
    with_data: str
    without_data: str


# Ordered think / say / do; each resolves sub-score first, then the cluster average.
_NARRATIVES: dict[str, _Narrative] = {
    "think": _Narrative(
        "true_belief",
        "inner_stance_score",
        "Average inner belief score",
        "Based on {count} agent beliefs.",
        "No belief data available.",
    ),
    "say": _Narrative(
        "public_expression",
        "expressed_stance_score",
        "Average public expression score",
        "{count} agents expressed their views.",
        "No expression data available.",
    ),
    "do": _Narrative(
        "behavioral_action",
        "action_intensity",
        "Average action intensity",
        "{count} predicted behavioral outcomes.",
        "No action data available.",
    ),
}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator: halves go up, never to even."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def score_to_sentiment(score: float) -> float:
    """Map a 0-100 stance score onto -1..1."""
    return max(-1.0, min(1.0, (score - 50) / 50))


def calculate_cohesion(scores: Sequence[float]) -> int:
    """Agreement inside a cluster: 100 minus twice the population std-dev."""
    if not scores:
        return 0
    if len(scores) == 1:
        return 100
    spread = float(np.std(np.asarray(scores, dtype=float)))
    return int(round_half_up(max(0.0, 100 - spread * 2)))


def dominant_emotion(emotions: Iterable[Optional[str]], default: str = "neutral") -> str:
    """Most frequent label; ties go to the label seen first."""
    counts = Counter(emotion for emotion in emotions if emotion)
    if not counts:
        return default
    return counts.most_common(1)[0][0]


def extract_keywords(responses: Iterable[str], settings: Optional[AggregationSettings] = None) -> list[str]:
    """Frequency-ranked content words; ties keep first-seen order."""
    settings = settings or AggregationSettings()
    counts: Counter[str] = Counter()
    for response in responses:
        tokens = _NON_WORD.sub(" ", response.lower()).split()
        counts.update(
            token
            for token in tokens
            if len(token) >= settings.min_keyword_length and token not in settings.stop_words
        )
    if settings.keyword_limit == 0:
        return []
    return [word for word, _ in counts.most_common(settings.keyword_limit)]


def _sub_score(turn: Optional[ReactionTurn], record: str, field: str) -> Optional[float]:
    nested = getattr(turn, record, None) if turn is not None else None
    return getattr(nested, field, None) if nested is not None else None


def _build_analysis(turns: Sequence[Optional[ReactionTurn]], fallback: float) -> ClusterAnalysis:
    texts: dict[str, str] = {}
    for key, narrative in _NARRATIVES.items():
        values = [
            value
            for value in (_sub_score(turn, narrative.record, narrative.field) for turn in turns)
            if value is not None
        ]
        average = sum(values) / len(values) if values else fallback
        note = narrative.with_data.format(count=len(values)) if values else narrative.without_data
        texts[key] = f"{narrative.label}: {average:.1f}/100. {note}"
    return ClusterAnalysis(**texts)


def _agent_name(agent: Optional[PanelAgent]) -> str:
    if agent is not None and agent.name:
        return agent.name
    if agent is not None and agent.agent_number:
        return f"Agent {agent.agent_number}"
    return "Agent"


def _agent_samples(
    results: Sequence[ReactionResult],
    agents_by_id: dict[str, PanelAgent],
    limit: int,
) -> list[AgentSample]:
    samples = []
    for result in results[:limit]:
        turn = result.first_turn
        samples.append(
            AgentSample(
                id=result.agent_id,
                name=_agent_name(agents_by_id.get(result.agent_id)),
                score=(turn.stance_score if turn else None) or 0,
                emotion=(turn.emotion if turn else None) or "neutral",
                response=(turn.response if turn else None) or "",
            )
        )
    return samples


def _index_agents(panel: Iterable[PanelAgent]) -> dict[str, PanelAgent]:
    index: dict[str, PanelAgent] = {}
    for agent in panel:
        index.setdefault(agent.id, agent)
    return index


def aggregate_cluster(
    cluster: ClusterDefinition,
    results: Sequence[ReactionResult],
    panel: Sequence[PanelAgent],
    settings: Optional[AggregationSettings] = None,
) -> ClusterSummary:
    """Summarise one cluster from the full result and membership lists."""
    settings = settings or AggregationSettings()
    cluster_results = [result for result in results if result.cluster_id == cluster.id]
    cluster_agents = [agent for agent in panel if agent.cluster_id == cluster.id]
    turns = [result.first_turn for result in cluster_results]

    scores = [turn.stance_score for turn in turns if turn is not None and turn.stance_score is not None]
    emotions = [turn.emotion for turn in turns if turn is not None]
    responses = [turn.response for turn in turns if turn is not None and turn.response is not None]

    mean_score = sum(scores) / len(scores) if scores else settings.default_score

    summary = ClusterSummary(
        id=cluster.id,
        name=cluster.name,
        description=cluster.description,
        weight=cluster.weight,
        agent_count=len(cluster_agents) or len(cluster_results),
        avg_score=round_half_up(mean_score, 1),
        sentiment=score_to_sentiment(mean_score),
        cohesion=calculate_cohesion(scores),
        dominant_emotion=dominant_emotion(emotions, default=settings.default_emotion),
        keywords=extract_keywords(responses, settings),
        agent_samples=_agent_samples(cluster_results, _index_agents(panel), settings.sample_limit),
        verbatims=responses[: settings.verbatim_limit],
        analysis=_build_analysis(turns, mean_score),
    )
    logger.debug(
        "aggregate:cluster | id={} | results={} | avg_score={} | cohesion={} | emotion={}",
        summary.id,
        len(cluster_results),
        summary.avg_score,
        summary.cohesion,
        summary.dominant_emotion,
    )
    return summary


def aggregate_clusters(
    simulation: Simulation,
    settings: Optional[AggregationSettings] = None,
) -> list[ClusterSummary]:
    """One summary per configured cluster, in snapshot order."""
    return [
        aggregate_cluster(cluster, simulation.results, simulation.panel, settings)
        for cluster in simulation.clusters
    ]
