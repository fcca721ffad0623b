"""Synthetic simulation snapshots for demos and smoke tests."""

from __future__ import annotations

import random
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TypeVar

from .io_utils import write_json
from .schemas.simulation import Simulation

CONNECTORS = [
    "However",
    "Because",
    "Honestly",
    "Still",
    "Frankly",
    "Meanwhile",
    "Overall",
]

ARCHETYPES = [
    {
        "name": "Urban commuters",
        "description": "Young workers living downtown who rely on public transport every day.",
        "center": 72,
        "emotions": ["hope", "enthusiasm", "hope"],
        "concerns": ["transit", "traffic", "housing", "commute", "safety"],
    },
    {
        "name": "Small business owners",
        "description": "Shop and cafe owners worried about deliveries, parking and foot traffic.",
        "center": 35,
        "emotions": ["fear", "mistrust", "anger"],
        "concerns": ["deliveries", "parking", "customers", "taxes", "revenue"],
    },
    {
        "name": "Suburban families",
        "description": "Parents in the outer districts balancing school runs with long commutes.",
        "center": 55,
        "emotions": ["hope", "fear", "indifference"],
        "concerns": ["schools", "commute", "safety", "costs", "parking"],
    },
    {
        "name": "Retired residents",
        "description": "Long-time residents on fixed incomes who value calm streets and local services.",
        "center": 28,
        "emotions": ["cynicism", "mistrust", "sadness"],
        "concerns": ["pensions", "costs", "healthcare", "taxes", "noise"],
    },
    {
        "name": "Students",
        "description": "University students sharing flats and moving around by bike or bus.",
        "center": 80,
        "emotions": ["enthusiasm", "hope", "pride"],
        "concerns": ["climate", "housing", "transit", "rents", "bikes"],
    },
]

OPENERS = [
    "{connector}, this proposal would change how I deal with {concern} every week.",
    "{connector}, my first thought is about {concern} in our neighbourhood.",
    "{connector}, people around me keep talking about {concern} lately.",
]

SUPPORT = [
    "I think the plan could really improve {concern} for everyone.",
    "Better {concern} is exactly what this city needs right now.",
]

OPPOSE = [
    "I worry the plan makes {concern} worse for people like us.",
    "Nobody asked us how {concern} would be affected by this.",
]

MIXED = [
    "It might help with {concern}, though the details remain unclear.",
    "Some parts sound reasonable for {concern}, others feel rushed.",
]

ACTIONS = ["vote_for", "vote_against", "abstention", "petition_for", "petition_against", "no_action"]

DEFAULT_CREATED_AT = "2024-01-01T00:00:00Z"

T = TypeVar("T")


def _pick(rng: random.Random, items: Sequence[T]) -> T:
    return rng.choice(items)


def _clamp_score(value: float) -> float:
    return float(max(0, min(100, round(value))))


def _response_text(rng: random.Random, concerns: Sequence[str], score: float) -> str:
    first, second = rng.sample(list(concerns), k=2)
    opener = _pick(rng, OPENERS).format(connector=_pick(rng, CONNECTORS), concern=first)
    if score >= 60:
        stance = _pick(rng, SUPPORT)
    elif score <= 40:
        stance = _pick(rng, OPPOSE)
    else:
        stance = _pick(rng, MIXED)
    return f"{opener} {stance.format(concern=second)}"


def _turn(rng: random.Random, archetype: dict[str, Any], spread: float) -> dict[str, Any]:
    score = _clamp_score(rng.gauss(archetype["center"], spread))
    inner = _clamp_score(score + rng.uniform(-8, 8))
    return {
        "stance_score": score,
        "confidence": _clamp_score(rng.uniform(40, 95)),
        "emotion": _pick(rng, archetype["emotions"]),
        "response": _response_text(rng, archetype["concerns"], score),
        "true_belief": {"inner_stance_score": inner},
        "public_expression": {"expressed_stance_score": _clamp_score(score + rng.uniform(-5, 5))},
        "behavioral_action": {
            "action_type": _pick(rng, ACTIONS),
            "action_intensity": _clamp_score(rng.uniform(10, 90)),
        },
    }


def generate_simulation(
    clusters: int = 4,
    agents: int = 40,
    seed: int = 13,
    *,
    spread: float = 10.0,
    title: str = "Synthetic transit referendum",
    scenario: str = "The city proposes replacing two downtown car lanes with a dedicated bus corridor.",
    created_at: str = DEFAULT_CREATED_AT,
) -> dict[str, Any]:
    """Build a deterministic snapshot in the upstream record shape."""
    if clusters <= 0:
        raise ValueError("clusters must be greater than zero")
    if clusters > len(ARCHETYPES):
        raise ValueError(f"clusters={clusters} exceeds available archetypes ({len(ARCHETYPES)})")
    if agents < 0:
        raise ValueError("agents must be non-negative")

    rng = random.Random(seed)
    chosen = ARCHETYPES[:clusters]
    cluster_rows = [
        {
            "id": f"c{index:02d}",
            "name": archetype["name"],
            "description_prompt": archetype["description"],
            "weight": round(100 / clusters, 1),
        }
        for index, archetype in enumerate(chosen, start=1)
    ]

    panel: list[dict[str, Any]] = []
    results: list[dict[str, Any]] = []
    for number in range(1, agents + 1):
        slot = (number - 1) % clusters
        cluster_id = cluster_rows[slot]["id"]
        agent_id = f"a{number:04d}"
        panel.append({"id": agent_id, "agentNumber": number, "cluster_id": cluster_id})
        results.append(
            {
                "agentId": agent_id,
                "clusterId": cluster_id,
                "turns": [_turn(rng, chosen[slot], spread)],
            }
        )

    snapshot = {
        "id": f"sim-{seed:04d}",
        "title": title,
        "scenario": scenario,
        "createdAt": created_at,
        "clustersSnapshot": cluster_rows,
        "panelSnapshot": panel,
        "results": results,
    }
    Simulation.model_validate(snapshot)
    return snapshot


def write_simulation(output_path: Path, **kwargs: Any) -> dict[str, Any]:
    """Generate a snapshot and write it as JSON."""
    snapshot = generate_simulation(**kwargs)
    write_json(output_path, snapshot)
    return snapshot
