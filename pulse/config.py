"""
Configuration management for the pulse core.

Two layers:
  - Settings: environment-driven tunables (pydantic-settings, `.env` aware),
    cached via get_settings().
  - PulseConfig: the validated, immutable configuration object that is passed
    explicitly into every scoring/clustering call. Nothing in the core reads
    global state; a run is a pure function of (items, PulseConfig).

Static tables (emotion lexicon, tension weights, source trust) live here so
they can be tuned in one place.
"""

import json
import logging
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from pulse.errors import PulseConfigError
from pulse.schemas.base import Emotion, SourceType

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════════
# STATIC TABLES
# ══════════════════════════════════════════════════════════════════════════════

# Emotion keywords for deterministic scoring (universal, not region-specific).
# Matching is case-insensitive substring containment, so "fear" also hits
# "fearful" and "sure" also hits "measure". That looseness is accepted.
EMOTION_KEYWORDS: Dict[Emotion, List[str]] = {
    Emotion.ANGER: [
        "angry", "furious", "outrage", "rage", "hate", "disgusting", "unacceptable",
        "infuriating", "livid", "enraged", "hostile", "bitter", "protest", "riot",
        "condemn", "denounce", "fury", "wrath", "outraged",
    ],
    Emotion.ANXIETY: [
        "worried", "anxious", "fear", "scared", "threat", "danger", "warning", "alert",
        "crisis", "emergency", "concern", "uncertain", "risk", "tension", "volatile",
        "unstable", "alarming", "concerning", "troubling", "nervous",
    ],
    Emotion.SADNESS: [
        "sad", "tragic", "death", "killed", "victim", "mourn", "grief", "loss", "devastated",
        "heartbreaking", "mourning", "sorrow", "painful", "funeral", "tragedy",
        "disaster", "casualties", "suffering",
    ],
    Emotion.RESILIENCE: [
        "strong", "resilient", "united", "together", "fight", "defend", "brave", "hero",
        "courage", "solidarity", "endure", "persevere", "overcome", "survive",
        "determined", "steadfast", "unwavering",
    ],
    Emotion.HOPE: [
        "hope", "peace", "progress", "improve", "better", "optimistic", "breakthrough",
        "promising", "recovery", "rebuild", "healing", "resolution", "agreement",
        "deal", "success", "positive", "growth",
    ],
    Emotion.EXCITEMENT: [
        "exciting", "amazing", "great", "success", "win", "celebrate", "achievement",
        "victory", "triumph", "historic", "milestone", "breakthrough", "incredible",
        "remarkable", "stunning", "impressive",
    ],
    Emotion.CYNICISM: [
        "lol", "lmao", "yeah right", "sure", "typical", "surprise", "expected", "joke",
        "as usual", "nothing new", "of course", "predictable", "unsurprising",
        "ironic", "sarcastic",
    ],
    Emotion.NEUTRAL: [],
}

# Trust per source type (0-1). Unknown types fall back to DEFAULT_TRUST.
DEFAULT_SOURCE_TRUST: Dict[str, float] = {
    SourceType.SEARCH.value: 0.8,
}
DEFAULT_TRUST = 0.5


# ══════════════════════════════════════════════════════════════════════════════
# VALIDATED RUN CONFIGURATION
# ══════════════════════════════════════════════════════════════════════════════

class NegativeWeights(BaseModel):
    """Negative emotions increase tension."""
    anger: float = Field(default=1.0, ge=0.0)
    anxiety: float = Field(default=1.0, ge=0.0)
    sadness: float = Field(default=0.7, ge=0.0)
    cynicism: float = Field(default=0.4, ge=0.0)

    class Config:
        frozen = True


class PositiveWeights(BaseModel):
    """Positive emotions decrease tension."""
    resilience: float = Field(default=0.5, ge=0.0)
    hope: float = Field(default=0.7, ge=0.0)
    excitement: float = Field(default=0.3, ge=0.0)

    class Config:
        frozen = True


class EmotionWeights(BaseModel):
    """Weights for turning an emotion distribution into the Tension Index."""
    negative: NegativeWeights = Field(default_factory=NegativeWeights)
    positive: PositiveWeights = Field(default_factory=PositiveWeights)
    # How much the positive score offsets the negative one
    positive_reduction_factor: float = Field(default=0.5, ge=0.0)

    class Config:
        frozen = True


DEFAULT_EMOTION_WEIGHTS = EmotionWeights()


class PulseConfig(BaseModel):
    """
    Every tunable of a pulse run, validated at construction.

    Out-of-range values (thresholds outside [0, 1], min_cluster_size < 1,
    non-positive caps) raise pydantic.ValidationError immediately instead of
    silently producing odd clusters later.
    """
    # Clustering
    similarity_threshold: float = Field(default=0.25, ge=0.0, le=1.0)
    max_topics: int = Field(default=12, ge=1)
    min_cluster_size: int = Field(default=2, ge=1)
    keywords_per_topic: int = Field(default=5, ge=1)
    receipts_per_topic: int = Field(default=5, ge=1)

    # Dedup (separate from the clustering threshold)
    dedup_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    # Weighting
    recency_half_life_hours: float = Field(default=6.0, gt=0.0)
    engagement_cap: int = Field(default=1000, ge=1)
    default_relevance: float = Field(default=0.5, ge=0.0, le=1.0)

    # Emotion / tension
    emotion_weights: EmotionWeights = Field(default_factory=EmotionWeights)
    emotion_lexicon: Dict[Emotion, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in EMOTION_KEYWORDS.items()}
    )

    # Relevance
    relevance_keywords: List[str] = Field(default_factory=list)
    source_trust: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_SOURCE_TRUST))
    search_boost: float = Field(default=0.1, ge=0.0, le=1.0)

    # Receipts feed
    receipts_feed_size: int = Field(default=20, ge=1)

    class Config:
        frozen = True

    @field_validator("source_trust")
    @classmethod
    def trust_in_unit_interval(cls, v: Dict[str, float]) -> Dict[str, float]:
        bad = {k: t for k, t in v.items() if not 0.0 <= t <= 1.0}
        if bad:
            raise ValueError(f"source trust scores must be within [0, 1]: {bad}")
        return v

    @field_validator("relevance_keywords")
    @classmethod
    def lowercase_keywords(cls, v: List[str]) -> List[str]:
        return [k.lower() for k in v if k and k.strip()]

    def with_overrides(self, **overrides) -> "PulseConfig":
        """Return a validated copy with some fields replaced (None values ignored)."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        try:
            return PulseConfig(**{**self.model_dump(), **updates})
        except ValidationError as e:
            raise PulseConfigError(str(e)) from e


# ══════════════════════════════════════════════════════════════════════════════
# ENVIRONMENT SETTINGS
# ══════════════════════════════════════════════════════════════════════════════

class Settings(BaseSettings):
    """Pulse tunables loaded from environment variables (or `.env`)."""

    # ── Clustering (TF-IDF + greedy cosine) ──
    # 0.25 groups headlines sharing ~2 distinctive terms; raise for tighter topics.
    similarity_threshold: float = Field(default=0.25, alias="PULSE_SIMILARITY_THRESHOLD")
    max_topics: int = Field(default=12, alias="PULSE_MAX_TOPICS")
    min_cluster_size: int = Field(default=2, alias="PULSE_MIN_CLUSTER_SIZE")
    keywords_per_topic: int = Field(default=5, alias="PULSE_KEYWORDS_PER_TOPIC")
    receipts_per_topic: int = Field(default=5, alias="PULSE_RECEIPTS_PER_TOPIC")

    # ── Dedup ──
    # 0.5 = moderate; 0.8 catches only near-identical items.
    dedup_threshold: float = Field(default=0.5, alias="PULSE_DEDUP_THRESHOLD")

    # ── Weighting ──
    recency_half_life_hours: float = Field(default=6.0, alias="PULSE_RECENCY_HALF_LIFE_HOURS")
    engagement_cap: int = Field(default=1000, alias="PULSE_ENGAGEMENT_CAP")

    # ── Relevance ──
    # Comma-separated, e.g. "tel aviv,jerusalem,israel"
    relevance_keywords: str = Field(default="", alias="PULSE_RELEVANCE_KEYWORDS")
    # JSON object, e.g. '{"search": 0.8, "reddit": 0.6}'
    source_trust: str = Field(default="", alias="PULSE_SOURCE_TRUST")

    # ── Tension weights (JSON string, override via env) ──
    emotion_weights: str = Field(default="", alias="PULSE_EMOTION_WEIGHTS")

    # ── Snapshots ──
    snapshot_retention_days: int = Field(default=30, alias="PULSE_SNAPSHOT_RETENTION_DAYS")

    log_level: str = Field(default="INFO", alias="PULSE_LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True

    def parsed_keywords(self) -> List[str]:
        return [k.strip() for k in self.relevance_keywords.split(",") if k.strip()]

    def parsed_source_trust(self) -> Dict[str, float]:
        if not self.source_trust:
            return dict(DEFAULT_SOURCE_TRUST)
        table = json.loads(self.source_trust)
        return {str(k): float(v) for k, v in table.items()}

    def parsed_emotion_weights(self) -> EmotionWeights:
        if not self.emotion_weights:
            return DEFAULT_EMOTION_WEIGHTS
        return EmotionWeights.model_validate_json(self.emotion_weights)

    def to_pulse_config(self, relevance_keywords: Optional[List[str]] = None) -> PulseConfig:
        """Build the validated run configuration.

        Args:
            relevance_keywords: Keyword list from a KeywordProvider. Overrides
                                PULSE_RELEVANCE_KEYWORDS when given.
        """
        keywords = relevance_keywords if relevance_keywords is not None else self.parsed_keywords()
        try:
            return PulseConfig(
                similarity_threshold=self.similarity_threshold,
                max_topics=self.max_topics,
                min_cluster_size=self.min_cluster_size,
                keywords_per_topic=self.keywords_per_topic,
                receipts_per_topic=self.receipts_per_topic,
                dedup_threshold=self.dedup_threshold,
                recency_half_life_hours=self.recency_half_life_hours,
                engagement_cap=self.engagement_cap,
                emotion_weights=self.parsed_emotion_weights(),
                relevance_keywords=keywords,
                source_trust=self.parsed_source_trust(),
            )
        except ValueError as e:
            # pydantic ValidationError and JSON decode errors are both ValueErrors
            raise PulseConfigError(f"Invalid PULSE_* settings: {e}") from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Basic console logging for scripts and notebooks. Libraries never call this."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(levelname)s: %(name)s: %(message)s",
    )
