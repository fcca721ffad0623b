"""Opinion bridges: how persuadable one cluster is relative to another."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from itertools import combinations
from typing import Optional

from loguru import logger

from .config import BridgeSettings
from .schemas.spatial import BridgeType, ClusterSummary, OpinionBridge

FALLBACK_VECTOR = "Build connection through dialogue and understanding."


def classify_bridge(strength: float, settings: Optional[BridgeSettings] = None) -> BridgeType:
    settings = settings or BridgeSettings()
    if strength >= settings.strong_threshold:
        return "strong"
    if strength >= settings.moderate_threshold:
        return "moderate"
    return "weak"


def persuasion_vector(
    shared_keywords: Sequence[str],
    shared_emotions: Sequence[str],
    score_difference: float,
    settings: Optional[BridgeSettings] = None,
) -> str:
    """Deterministic guidance for moving one cluster toward another."""
    settings = settings or BridgeSettings()
    sentences = []
    if shared_keywords:
        named = ", ".join(shared_keywords[: settings.max_named_keywords])
        sentences.append(f"Leverage shared concerns: {named}.")
    if score_difference < settings.close_gap:
        sentences.append("Opinions are close - focus on common ground.")
    elif score_difference > settings.wide_gap:
        sentences.append("Significant gap - bridge through shared emotions or values.")
    if shared_emotions:
        sentences.append(f"Both feel {shared_emotions[0]} - use emotional resonance.")
    return " ".join(sentences) or FALLBACK_VECTOR


def build_bridge(
    source: ClusterSummary,
    target: ClusterSummary,
    settings: Optional[BridgeSettings] = None,
) -> OpinionBridge:
    settings = settings or BridgeSettings()
    target_keywords = set(target.keywords)
    shared_keywords = [keyword for keyword in dict.fromkeys(source.keywords) if keyword in target_keywords]
    shared_emotions = [source.dominant_emotion] if source.dominant_emotion == target.dominant_emotion else []
    score_difference = abs(source.avg_score - target.avg_score)

    raw_strength = (
        settings.base_strength
        + len(shared_keywords) * settings.keyword_bonus
        + len(shared_emotions) * settings.emotion_bonus
        - score_difference / 100
    )
    strength = min(1.0, max(0.0, raw_strength))

    return OpinionBridge(
        source_id=source.id,
        target_id=target.id,
        strength=strength,
        shared_keywords=shared_keywords,
        shared_emotions=shared_emotions,
        score_difference=score_difference,
        bridge_type=classify_bridge(strength, settings),
        persuasion_vector=persuasion_vector(shared_keywords, shared_emotions, score_difference, settings),
    )


def analyze_bridges(
    clusters: Sequence[ClusterSummary],
    settings: Optional[BridgeSettings] = None,
) -> list[OpinionBridge]:
    """One bridge per unordered pair, strongest first (stable on ties)."""
    bridges = [build_bridge(source, target, settings) for source, target in combinations(clusters, 2)]
    bridges.sort(key=lambda bridge: bridge.strength, reverse=True)
    logger.debug(
        "bridges:done | count={} | by_type={}",
        len(bridges),
        dict(Counter(bridge.bridge_type for bridge in bridges)),
    )
    return bridges
