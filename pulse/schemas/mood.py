"""
Emotion distribution models.

EmotionDistribution is a fixed-shape record with exactly one field per
Emotion member. Code that walks categories iterates `EMOTIONS` and uses
`get()`, so adding a category is a schema change, not a silent new dict key.

Invariant (normalized form): all values >= 0 and sum to 1.0 (±1e-6).
The pre-normalized weighted sums used inside aggregation share the same
shape but are not required to sum to 1.
"""

from typing import Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .base import EMOTIONS, Emotion

EmotionKey = Union[Emotion, str]


class _EmotionRecord(BaseModel):
    """Shared accessors for the 8-field emotion records."""

    class Config:
        frozen = True

    def get(self, emotion: EmotionKey) -> float:
        return getattr(self, Emotion(emotion).value)

    def as_dict(self) -> Dict[str, float]:
        return {e.value: self.get(e) for e in EMOTIONS}

    def total(self) -> float:
        return sum(self.get(e) for e in EMOTIONS)

    @classmethod
    def from_mapping(cls, values: Mapping[EmotionKey, float]):
        """Build from a partial mapping; missing categories are 0."""
        data = {e.value: 0.0 for e in EMOTIONS}
        for key, value in values.items():
            data[Emotion(key).value] = float(value)
        return cls(**data)


class EmotionDistribution(_EmotionRecord):
    """Non-negative weight per emotion category."""
    anger: float = Field(default=0.0, ge=0.0)
    anxiety: float = Field(default=0.0, ge=0.0)
    sadness: float = Field(default=0.0, ge=0.0)
    resilience: float = Field(default=0.0, ge=0.0)
    hope: float = Field(default=0.0, ge=0.0)
    excitement: float = Field(default=0.0, ge=0.0)
    cynicism: float = Field(default=0.0, ge=0.0)
    neutral: float = Field(default=0.0, ge=0.0)

    @classmethod
    def empty(cls) -> "EmotionDistribution":
        return cls()

    @classmethod
    def neutral_only(cls) -> "EmotionDistribution":
        return cls(neutral=1.0)

    def dominant(self) -> Emotion:
        """Category with the largest weight; NEUTRAL when everything is 0."""
        best = Emotion.NEUTRAL
        best_value = 0.0
        for emotion in EMOTIONS:
            value = self.get(emotion)
            if value > best_value:
                best_value = value
                best = emotion
        return best


class EmotionDelta(_EmotionRecord):
    """Signed per-category change between two distributions."""
    anger: float = 0.0
    anxiety: float = 0.0
    sadness: float = 0.0
    resilience: float = 0.0
    hope: float = 0.0
    excitement: float = 0.0
    cynicism: float = 0.0
    neutral: float = 0.0


class EmotionWithDelta(BaseModel):
    """One emotion's current value and change vs. yesterday (positive = increased)."""
    emotion: Emotion
    value: float
    delta: float = 0.0


class RegionMood(BaseModel):
    """Mood aggregate for one country (map colouring / regional summaries)."""
    country: str
    tension_index: int = Field(ge=0, le=100)
    item_count: int = 0
    emotions: EmotionDistribution
    summary: Optional[str] = None  # filled by an external summarizer
    item_ids: List[str] = Field(default_factory=list)
