"""Tunable constants for aggregation, layout and bridge detection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Function words dropped before keyword counting. Empirical, not linguistic.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
        "by", "from", "as", "is", "was", "are", "were", "been", "be", "have", "has", "had",
        "do", "does", "did", "will", "would", "could", "should", "may", "might", "must",
        "i", "you", "he", "she", "it", "we", "they", "this", "that", "these", "those",
        "my", "your", "his", "her", "its", "our", "their", "what", "which", "who", "whom",
        "very", "just", "also", "more", "most", "some", "any", "all", "both", "each",
        "not", "no", "yes", "can", "about", "into", "through", "during", "before", "after",
    }
)


class _Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class AggregationSettings(_Settings):
    """Limits and fallbacks used when summarising a cluster."""

    keyword_limit: int = Field(default=8, ge=0, description="Maximum keywords per cluster.")
    min_keyword_length: int = Field(default=4, ge=1, description="Shortest token kept as a keyword.")
    sample_limit: int = Field(default=10, ge=0, description="Maximum agent samples per cluster.")
    verbatim_limit: int = Field(default=5, ge=0, description="Maximum verbatims per cluster.")
    default_score: float = Field(default=50.0, ge=0, le=100, description="Score used when none exist.")
    default_emotion: str = Field(default="neutral", description="Emotion used when none exist.")
    stop_words: frozenset[str] = Field(default=STOP_WORDS, description="Tokens never counted.")


class LayoutSettings(_Settings):
    """Force-directed layout parameters."""

    iterations: int = Field(default=50, ge=0, description="Relaxation rounds.")
    radius: float = Field(default=5.0, gt=0, description="Radius of the starting circle.")
    height_scale: float = Field(default=10.0, gt=0, description="Score points per unit of height.")
    spring: float = Field(default=0.5, description="Spring constant toward the ideal distance.")
    repulsion: float = Field(default=2.0, ge=0, description="Close-range repulsion constant.")
    min_distance: float = Field(default=2.0, ge=0, description="Distance below which repulsion applies.")
    base_distance: float = Field(default=2.0, ge=0, description="Ideal distance of identical clusters.")
    distance_span: float = Field(default=8.0, ge=0, description="Extra ideal distance at zero similarity.")
    initial_damping: float = Field(default=0.3, ge=0, description="Step scale on the first round.")
    zero_distance: float = Field(default=0.1, gt=0, description="Stand-in for coincident points.")


class BridgeSettings(_Settings):
    """Weights and thresholds for opinion bridges."""

    base_strength: float = 0.5
    keyword_bonus: float = 0.15
    emotion_bonus: float = 0.2
    strong_threshold: float = Field(default=0.6, ge=0, le=1)
    moderate_threshold: float = Field(default=0.4, ge=0, le=1)
    close_gap: float = Field(default=20.0, ge=0, description="Score gap under which opinions are close.")
    wide_gap: float = Field(default=40.0, ge=0, description="Score gap over which opinions are far apart.")
    max_named_keywords: int = Field(default=3, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "BridgeSettings":
        if self.moderate_threshold > self.strong_threshold:
            raise ValueError("moderate_threshold must not exceed strong_threshold")
        if self.close_gap > self.wide_gap:
            raise ValueError("close_gap must not exceed wide_gap")
        return self


class ProjectionSettings(_Settings):
    """Everything the orchestrator needs."""

    aggregation: AggregationSettings = Field(default_factory=AggregationSettings)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    bridges: BridgeSettings = Field(default_factory=BridgeSettings)
    include_bridges: bool = True


DEFAULT_SETTINGS = ProjectionSettings()
