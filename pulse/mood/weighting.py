"""
Per-item importance weight shared by emotion aggregation and topic ranking.

WEIGHT = recency × log10(min(engagement, cap) + 2) × relevance

  recency:     exponential decay, exp(-ln2 · age_hours / half_life).
               1.0 = just now, 0.5 = one half-life (6h) old, 0.25 = 12h.
  engagement:  log-scaled and capped so one viral thread cannot dominate.
               +2 keeps zero-engagement items (RSS) at log10(2) ≈ 0.30.
  relevance:   item.relevance_score, 0.5 when the item was never scored.

REF: BERTrend (Boutaleb et al. 2024): exponential decay for trend freshness.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from pulse.errors import check_positive
from pulse.schemas import ContentItem

# ln(2), rounded the same way everywhere so weights stay comparable
DECAY_CONSTANT = 0.693

DEFAULT_HALF_LIFE_HOURS = 6.0
DEFAULT_ENGAGEMENT_CAP = 1000
DEFAULT_RELEVANCE = 0.5


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def recency_weight(
    created_at: datetime,
    half_life_hours: float = DEFAULT_HALF_LIFE_HOURS,
    now: Optional[datetime] = None,
) -> float:
    """Exponential freshness weight. Items from the future weigh more than 1."""
    check_positive("half_life_hours", half_life_hours)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    age_hours = (now - _as_utc(created_at)).total_seconds() / 3600
    return math.exp(-DECAY_CONSTANT * age_hours / half_life_hours)


def cap_engagement(engagement: int, cap: int = DEFAULT_ENGAGEMENT_CAP) -> int:
    return min(engagement, cap)


def item_weight(
    item: ContentItem,
    half_life_hours: float = DEFAULT_HALF_LIFE_HOURS,
    engagement_cap: int = DEFAULT_ENGAGEMENT_CAP,
    default_relevance: float = DEFAULT_RELEVANCE,
    now: Optional[datetime] = None,
) -> float:
    recency = recency_weight(item.created_at, half_life_hours, now)
    engagement = math.log10(cap_engagement(item.engagement, engagement_cap) + 2)
    relevance = item.relevance_score if item.relevance_score is not None else default_relevance
    return recency * engagement * relevance
