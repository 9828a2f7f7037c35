"""
Stage 3-4: emotion scoring, aggregation and the Tension Index.

Modules:
- weighting: recency × engagement × relevance item weight
- emotions: keyword emotion scoring, aggregation, deltas, labels
- tension: Tension Index and per-item mood score
- regions: per-country mood aggregation
"""

from pulse.mood.weighting import recency_weight, cap_engagement, item_weight
from pulse.mood.emotions import (
    EMOTION_LABELS,
    aggregate_emotions,
    calculate_emotion_deltas,
    format_emotion,
    get_dominant_emotion,
    diff_emotions,
    normalize_distribution,
    score_item_emotions,
)
from pulse.mood.tension import calculate_tension_index, calculate_item_mood_score
from pulse.mood.regions import aggregate_mood_by_region
