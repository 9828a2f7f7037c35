"""
Deterministic, keyword-driven emotion scoring.

PER ITEM:
  For each non-neutral category, count lexicon keywords contained in
  `title + " " + text` (case-insensitive substring). Normalize counts to a
  distribution. No hits at all → {neutral: 1.0}.

AGGREGATE:
  Weighted mean of per-item distributions (weight = recency × log-engagement
  × relevance, see pulse.mood.weighting), duplicates skipped, renormalized.
  Empty input or all-zero weights → {neutral: 1.0}.

Every returned distribution is normalized: non-negative, sums to 1 (±1e-6).
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pulse.config import EMOTION_KEYWORDS, PulseConfig
from pulse.schemas import (
    EMOTIONS,
    NON_NEUTRAL_EMOTIONS,
    ContentItem,
    Emotion,
    EmotionDelta,
    EmotionDistribution,
    EmotionWithDelta,
)
from pulse.mood.weighting import (
    DEFAULT_ENGAGEMENT_CAP,
    DEFAULT_HALF_LIFE_HOURS,
    DEFAULT_RELEVANCE,
    item_weight,
)

logger = logging.getLogger(__name__)

Lexicon = Mapping[Emotion, Sequence[str]]

# Short display labels
EMOTION_LABELS: Dict[Emotion, str] = {e: e.value.capitalize() for e in EMOTIONS}

# Long display labels
_LONG_LABELS: Dict[Emotion, str] = {
    Emotion.ANGER: "Anger",
    Emotion.ANXIETY: "Anxiety / Tension",
    Emotion.SADNESS: "Sadness / Grief",
    Emotion.RESILIENCE: "Resilience / Determination",
    Emotion.HOPE: "Hope",
    Emotion.EXCITEMENT: "Excitement",
    Emotion.CYNICISM: "Cynicism / Sarcasm",
    Emotion.NEUTRAL: "Neutral / Informational",
}


def normalize_distribution(dist: EmotionDistribution) -> EmotionDistribution:
    """Scale to sum 1. A zero distribution becomes {neutral: 1.0}."""
    total = dist.total()
    if total <= 0:
        return EmotionDistribution.neutral_only()
    return EmotionDistribution.from_mapping({e: dist.get(e) / total for e in EMOTIONS})


def score_text_emotions(text: str, lexicon: Optional[Lexicon] = None) -> EmotionDistribution:
    lexicon = EMOTION_KEYWORDS if lexicon is None else lexicon
    lowered = text.lower()

    counts = {}
    for emotion in NON_NEUTRAL_EMOTIONS:
        keywords = lexicon.get(emotion, ())
        counts[emotion] = sum(1 for k in keywords if k and k.lower() in lowered)

    if sum(counts.values()) == 0:
        return EmotionDistribution.neutral_only()
    return normalize_distribution(EmotionDistribution.from_mapping(counts))


def score_item_emotions(item: ContentItem, lexicon: Optional[Lexicon] = None) -> EmotionDistribution:
    """Normalized emotion distribution of one item's own text."""
    return score_text_emotions(item.combined_text, lexicon)


def aggregate_emotions(
    items: Iterable[ContentItem],
    lexicon: Optional[Lexicon] = None,
    half_life_hours: float = DEFAULT_HALF_LIFE_HOURS,
    engagement_cap: int = DEFAULT_ENGAGEMENT_CAP,
    default_relevance: float = DEFAULT_RELEVANCE,
    now: Optional[datetime] = None,
) -> EmotionDistribution:
    """Weighted emotion distribution of a set of items (duplicates skipped)."""
    weighted = {e: 0.0 for e in EMOTIONS}
    total_weight = 0.0

    for item in items:
        if item.duplicate_of:
            continue
        dist = score_item_emotions(item, lexicon)
        weight = item_weight(item, half_life_hours, engagement_cap, default_relevance, now)
        for emotion in EMOTIONS:
            weighted[emotion] += dist.get(emotion) * weight
        total_weight += weight

    if total_weight <= 0:
        return EmotionDistribution.neutral_only()

    return normalize_distribution(
        EmotionDistribution.from_mapping({e: v / total_weight for e, v in weighted.items()})
    )


def aggregate_with_config(
    items: Iterable[ContentItem],
    config: PulseConfig,
    now: Optional[datetime] = None,
) -> EmotionDistribution:
    return aggregate_emotions(
        items,
        lexicon=config.emotion_lexicon,
        half_life_hours=config.recency_half_life_hours,
        engagement_cap=config.engagement_cap,
        default_relevance=config.default_relevance,
        now=now,
    )


# ══════════════════════════════════════════════════════════════════════════════
# DELTAS & PRESENTATION HELPERS
# ══════════════════════════════════════════════════════════════════════════════

def diff_emotions(
    current: EmotionDistribution,
    previous: Optional[EmotionDistribution],
) -> EmotionDelta:
    """Per-category change vs. the previous distribution; all zeros without one."""
    if previous is None:
        return EmotionDelta()
    return EmotionDelta.from_mapping({e: current.get(e) - previous.get(e) for e in EMOTIONS})


def calculate_emotion_deltas(
    current: EmotionDistribution,
    previous: Optional[EmotionDistribution],
) -> List[EmotionWithDelta]:
    """One EmotionWithDelta per category, in canonical order."""
    deltas = diff_emotions(current, previous)
    return [
        EmotionWithDelta(emotion=e, value=current.get(e), delta=deltas.get(e))
        for e in EMOTIONS
    ]


def get_dominant_emotion(dist: EmotionDistribution) -> Emotion:
    """Largest category; ties go to the earlier category, all-zero → neutral."""
    return dist.dominant()


def format_emotion(emotion: Emotion) -> str:
    return _LONG_LABELS[Emotion(emotion)]
