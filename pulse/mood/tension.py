"""
Tension Index (0-100): one number for how tense the mood is.

  negative  = anger·1.0 + anxiety·1.0 + sadness·0.7 + cynicism·0.4
  positive  = resilience·0.5 + hope·0.7 + excitement·0.3
  tension   = max(0, negative − positive × 0.5)
  index     = min(100, round_half_up(tension × 100))

All weights come from EmotionWeights (overridable via PULSE_EMOTION_WEIGHTS).
An all-neutral distribution has index 0; pure anger has index 100.
"""

import math
from typing import Optional

from pulse.config import DEFAULT_EMOTION_WEIGHTS, EmotionWeights
from pulse.schemas import ContentItem, EmotionDistribution
from pulse.mood.emotions import Lexicon, score_item_emotions


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; 0.5 must always go up
    return int(math.floor(value + 0.5))


def calculate_tension_index(
    dist: EmotionDistribution,
    weights: Optional[EmotionWeights] = None,
) -> int:
    w = weights or DEFAULT_EMOTION_WEIGHTS
    negative = (
        dist.anger * w.negative.anger
        + dist.anxiety * w.negative.anxiety
        + dist.sadness * w.negative.sadness
        + dist.cynicism * w.negative.cynicism
    )
    positive = (
        dist.resilience * w.positive.resilience
        + dist.hope * w.positive.hope
        + dist.excitement * w.positive.excitement
    )
    tension = max(0.0, negative - positive * w.positive_reduction_factor)
    return min(100, _round_half_up(tension * 100))


def calculate_item_mood_score(
    item: ContentItem,
    lexicon: Optional[Lexicon] = None,
    weights: Optional[EmotionWeights] = None,
) -> int:
    """0 = very tense, 100 = calm/positive. The inverse of the item's own tension."""
    return 100 - calculate_tension_index(score_item_emotions(item, lexicon), weights)
