"""
Topic, snapshot and pipeline-result models.

Hierarchy:
  PulseResult
    ├─ Topic (one per surviving cluster, ≤ max_topics)
    │    └─ Receipt (≤ receipts_per_topic)
    └─ RegionMood (one per country seen)

  Snapshot (persisted once per day by the caller)
    └─ SnapshotTopic (keywords + member ids only, ≤ 10)
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, Field, StrictInt, StrictStr, field_validator

from .base import EMOTIONS, Location
from .items import Receipt
from .mood import EmotionDistribution, EmotionWithDelta, RegionMood

# Snapshots keep at most this many topics.
SNAPSHOT_TOPIC_LIMIT = 10

# Placeholder until an enricher explains the topic.
PENDING_EXPLANATION = "Analyzing..."


class Topic(BaseModel):
    """A trending topic: one surviving cluster of deduplicated items."""
    id: str
    title: str
    keywords: List[str] = Field(default_factory=list)
    why_trending: str = PENDING_EXPLANATION
    emotion_mix: EmotionDistribution = Field(default_factory=EmotionDistribution.neutral_only)
    weight: float = 0.0
    delta: int = 0  # 0 = seen yesterday (or no snapshot), 1 = new today
    receipts: List[Receipt] = Field(default_factory=list)
    member_ids: List[str] = Field(default_factory=list)
    locations: Optional[List[Location]] = None

    @property
    def size(self) -> int:
        return len(self.member_ids)


class TopicEnrichment(BaseModel):
    """What an external enricher (LLM) returns for a topic."""
    title: str
    why_trending: str = ""


class SnapshotTopic(BaseModel):
    """Abbreviated topic stored in a daily snapshot. Both lists are required."""
    keywords: List[StrictStr]
    item_ids: List[StrictStr] = Field(
        validation_alias=AliasChoices("item_ids", "receipt_ids", "receiptIds"),
    )

    class Config:
        frozen = True
        populate_by_name = True


class Snapshot(BaseModel):
    """
    Immutable per-day record used only to compute day-over-day deltas.

    Validation is strict: a tension of "40", a partial or all-zero emotion
    map, or a topic without its ids makes the whole payload invalid.
    """
    date: StrictStr = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    tension_index: StrictInt = Field(
        ge=0, le=100,
        validation_alias=AliasChoices("tension_index", "tensionIndex"),
    )
    emotions: EmotionDistribution
    top_topics: List[SnapshotTopic] = Field(
        default_factory=list,
        max_length=SNAPSHOT_TOPIC_LIMIT,
        validation_alias=AliasChoices("top_topics", "topTopics"),
    )
    llm_outputs: Dict[StrictStr, StrictStr] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("llm_outputs", "llmOutputs"),
    )

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("emotions", mode="before")
    @classmethod
    def all_categories_numeric(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            missing = [e.value for e in EMOTIONS if e.value not in v]
            if missing:
                raise ValueError(f"emotions missing categories: {missing}")
            bad = {k: x for k, x in v.items() if isinstance(x, bool) or not isinstance(x, (int, float))}
            if bad:
                raise ValueError(f"emotion values must be numbers: {bad}")
        return v

    @field_validator("emotions")
    @classmethod
    def not_all_zero(cls, v: EmotionDistribution) -> EmotionDistribution:
        if v.total() <= 0:
            raise ValueError("emotion distribution sums to 0")
        return v


class PulseResult(BaseModel):
    """Everything one pipeline run derives from a batch of items."""
    tension_index: int = 0
    tension_delta: int = 0
    emotion_distribution: EmotionDistribution = Field(default_factory=EmotionDistribution.neutral_only)
    emotions: List[EmotionWithDelta] = Field(default_factory=list)
    overall_summary: str = ""
    topics: List[Topic] = Field(default_factory=list)
    receipts_feed: List[Receipt] = Field(default_factory=list)
    all_receipts: List[Receipt] = Field(default_factory=list)
    region_moods: List[RegionMood] = Field(default_factory=list)
    llm_outputs: Dict[str, str] = Field(default_factory=dict)
    input_count: int = 0
    unique_count: int = 0
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
