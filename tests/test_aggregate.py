"""Tests for per-cluster aggregation."""

import pytest

from opinionspace.aggregate import (
    aggregate_cluster,
    aggregate_clusters,
    calculate_cohesion,
    dominant_emotion,
    extract_keywords,
    round_half_up,
)
from opinionspace.config import AggregationSettings

CLUSTERS = [
    {"id": "c1", "name": "Commuters", "description_prompt": "People who ride the bus daily.", "weight": 60},
    {"id": "c2", "name": "Shop owners", "description_prompt": "Owners of small downtown shops.", "weight": 40},
]


def test_cluster_without_results_uses_fallbacks(make_simulation, result_row) -> None:
    simulation = make_simulation(CLUSTERS, results=[result_row("a1", "c1", score=80, emotion="hope")])
    summary = aggregate_cluster(simulation.clusters[1], simulation.results, simulation.panel)

    assert summary.avg_score == 50
    assert summary.cohesion == 0
    assert summary.keywords == []
    assert summary.agent_samples == []
    assert summary.verbatims == []
    assert summary.dominant_emotion == "neutral"
    assert summary.agent_count == 0
    assert summary.position is None
    assert summary.analysis.think == "Average inner belief score: 50.0/100. No belief data available."


def test_single_scored_result_is_fully_cohesive(make_simulation, result_row) -> None:
    simulation = make_simulation(CLUSTERS, results=[result_row("a1", "c1", score=50, emotion="hope")])
    summary = aggregate_cluster(simulation.clusters[0], simulation.results, simulation.panel)

    assert summary.cohesion == 100
    assert summary.dominant_emotion == "hope"
    assert summary.keywords == []
    assert summary.verbatims == []
    assert summary.agent_samples[0].response == ""


def test_identity_fields_are_copied(make_simulation) -> None:
    simulation = make_simulation(CLUSTERS)
    summary = aggregate_cluster(simulation.clusters[0], simulation.results, simulation.panel)

    assert summary.id == "c1"
    assert summary.name == "Commuters"
    assert summary.description == "People who ride the bus daily."
    assert summary.weight == 60


@pytest.mark.parametrize(
    ("scores", "expected"),
    [
        ([], 0),
        ([73], 100),
        ([50, 50], 100),
        ([45, 55], 90),
        ([40, 60], 80),
        ([30, 70], 60),
        ([0, 100], 0),
    ],
)
def test_calculate_cohesion(scores, expected) -> None:
    assert calculate_cohesion(scores) == expected


def test_cohesion_does_not_increase_with_spread() -> None:
    spreads = [0, 1, 2.5, 5, 10, 20, 30, 50]
    values = [calculate_cohesion([50 - spread, 50 + spread]) for spread in spreads]
    assert values == sorted(values, reverse=True)


def test_cohesion_rounds_half_up() -> None:
    # raw cohesion 99.0, then 98.5 (std-dev 0.75)
    assert calculate_cohesion([0, 1]) == 99
    assert calculate_cohesion([0, 1.5]) == 99


def test_dominant_emotion_ties_keep_first_seen() -> None:
    assert dominant_emotion(["fear", "hope", "hope", "fear"]) == "fear"
    assert dominant_emotion(["hope", "fear", "fear"]) == "fear"
    assert dominant_emotion([None, "", "anger"]) == "anger"
    assert dominant_emotion([]) == "neutral"
    assert dominant_emotion([None, ""]) == "neutral"


def test_extract_keywords_ranks_by_frequency_then_first_seen() -> None:
    responses = [
        "Zeta alpha, this is very much about ZETA!",
        "alpha beta; the tax plan",
    ]
    assert extract_keywords(responses) == ["zeta", "alpha", "much", "beta", "plan"]


def test_extract_keywords_drops_stop_words_and_short_tokens() -> None:
    responses = ["They would have been there about this and that, with more jobs for all."]
    assert extract_keywords(responses) == ["there", "jobs"]


def test_extract_keywords_caps_at_limit() -> None:
    words = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel", "india", "juliet"]
    keywords = extract_keywords([" ".join(words)])
    assert keywords == words[:8]

    narrow = AggregationSettings(keyword_limit=2)
    assert extract_keywords([" ".join(words)], narrow) == ["alpha", "bravo"]


def test_extract_keywords_treats_accented_letters_as_separators() -> None:
    assert extract_keywords(["La sécurité économique compte"]) == ["curit", "conomique", "compte"]


def test_samples_and_verbatims_are_capped_in_order(make_simulation, result_row) -> None:
    results = [
        result_row(f"a{i:02d}", "c1", score=40 + i, emotion="hope", response=f"Response number {i} about buses")
        for i in range(12)
    ]
    simulation = make_simulation(CLUSTERS, results=results)
    summary = aggregate_cluster(simulation.clusters[0], simulation.results, simulation.panel)

    assert [sample.id for sample in summary.agent_samples] == [f"a{i:02d}" for i in range(10)]
    assert summary.verbatims == [f"Response number {i} about buses" for i in range(5)]
    assert summary.agent_count == 12


def test_average_score_ignores_missing_and_non_numeric_scores(make_simulation, result_row) -> None:
    results = [
        result_row("a1", "c1", score=33),
        result_row("a2", "c1", score=34),
        result_row("a3", "c1", score=34),
        result_row("a4", "c1", emotion="fear"),
        result_row("a5", "c1", score=float("nan")),
        {"agentId": "a6", "clusterId": "c1", "turns": [{"stance_score": "high"}]},
        {"agentId": "a7", "clusterId": "c1", "turns": []},
    ]
    simulation = make_simulation(CLUSTERS, results=results)
    summary = aggregate_cluster(simulation.clusters[0], simulation.results, simulation.panel)

    assert summary.avg_score == 33.7
    assert summary.sentiment == pytest.approx((101 / 3 - 50) / 50)
    assert summary.cohesion == 99


def test_analysis_prefers_sub_scores(make_simulation, result_row) -> None:
    results = [
        result_row("a1", "c1", score=60, true_belief={"inner_stance_score": 70}),
        result_row(
            "a2",
            "c1",
            score=80,
            true_belief={"inner_stance_score": 90},
            public_expression={"expressed_stance_score": 55},
        ),
        result_row("a3", "c1", score=70, behavioral_action={"action_type": "vote_for"}),
    ]
    simulation = make_simulation(CLUSTERS, results=results)
    summary = aggregate_cluster(simulation.clusters[0], simulation.results, simulation.panel)

    assert summary.analysis.think == "Average inner belief score: 80.0/100. Based on 2 agent beliefs."
    assert summary.analysis.say == "Average public expression score: 55.0/100. 1 agents expressed their views."
    assert summary.analysis.do == "Average action intensity: 70.0/100. No action data available."


def test_agent_names_come_from_panel(make_simulation, result_row) -> None:
    panel = [
        {"id": "a1", "cluster_id": "c1", "name": "Ada"},
        {"id": "a2", "cluster_id": "c1", "agentNumber": 7},
        {"id": "a9", "cluster_id": "c1"},
    ]
    results = [
        result_row("a1", "c1", score=50),
        result_row("a2", "c1", score=50),
        result_row("a3", "c1"),
    ]
    simulation = make_simulation(CLUSTERS, results=results, panel=panel)
    summary = aggregate_cluster(simulation.clusters[0], simulation.results, simulation.panel)

    assert [sample.name for sample in summary.agent_samples] == ["Ada", "Agent 7", "Agent"]
    assert summary.agent_samples[2].score == 0
    assert summary.agent_samples[2].emotion == "neutral"
    assert summary.agent_count == 3


def test_aggregate_clusters_keeps_snapshot_order(make_simulation, result_row) -> None:
    results = [result_row("a1", "c2", score=20), result_row("a2", "c1", score=90)]
    simulation = make_simulation(list(reversed(CLUSTERS)), results=results)

    summaries = aggregate_clusters(simulation)
    assert [summary.id for summary in summaries] == ["c2", "c1"]
    assert [summary.avg_score for summary in summaries] == [20, 90]


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(10.25, 1) == 10.3
