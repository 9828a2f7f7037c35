"""
Day-over-day memory: compares today's pulse against yesterday's snapshot.

Stores one abbreviated Snapshot per calendar day (tension, emotions, the
top 10 topics as keywords + member ids, opaque LLM strings). On each run:
1. Tension delta = today − yesterday (0 without a snapshot)
2. Emotion deltas = per-category difference (zeros without a snapshot)
3. Topic delta: best keyword overlap against yesterday's topics,
   |∩| / max(|a|, |b|). Below 0.3 → the topic is new (1), otherwise 0.
   Without a snapshot every topic is 0 (unknown, not new).
4. Stale snapshots (older than keep_days) are pruned by the store.

Persistence mechanics belong to the caller (SnapshotStore protocol);
InMemorySnapshotStore is the in-process implementation.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from pulse.mood.emotions import calculate_emotion_deltas, diff_emotions
from pulse.schemas import (
    SNAPSHOT_TOPIC_LIMIT,
    EmotionDelta,
    EmotionDistribution,
    Snapshot,
    SnapshotTopic,
    Topic,
)

logger = logging.getLogger(__name__)

# Keyword overlap below this means the topic was not around yesterday.
NEW_TOPIC_OVERLAP = 0.3

DEFAULT_KEEP_DAYS = 30

DateLike = Union[date, datetime]

__all__ = [
    "calculate_tension_delta", "calculate_topic_delta", "apply_topic_deltas",
    "get_emotion_deltas", "calculate_emotion_deltas", "build_snapshot",
    "parse_snapshot_payload", "get_date_string", "get_yesterday_date_string",
    "InMemorySnapshotStore",
]


# ══════════════════════════════════════════════════════════════════════════════
# DATES
# ══════════════════════════════════════════════════════════════════════════════

def get_date_string(day: Optional[DateLike] = None) -> str:
    """YYYY-MM-DD of a date/datetime (UTC today when omitted)."""
    if day is None:
        day = datetime.now(timezone.utc)
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


def get_yesterday_date_string(today: Optional[DateLike] = None) -> str:
    if today is None:
        today = datetime.now(timezone.utc)
    if isinstance(today, datetime):
        today = today.date()
    return get_date_string(today - timedelta(days=1))


# ══════════════════════════════════════════════════════════════════════════════
# DELTAS
# ══════════════════════════════════════════════════════════════════════════════

def get_emotion_deltas(current: EmotionDistribution, snapshot: Optional[Snapshot]) -> EmotionDelta:
    """Per-category change vs. the snapshot's emotions; all zeros without one."""
    return diff_emotions(current, snapshot.emotions if snapshot is not None else None)


def calculate_tension_delta(current: int, snapshot: Optional[Snapshot]) -> int:
    if snapshot is None:
        return 0
    return current - snapshot.tension_index


def keyword_overlap(a: List[str], b: List[str]) -> float:
    """|a ∩ b| / max(|a|, |b|); 0.0 when both are empty."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    b_set = set(b)
    return sum(1 for k in a if k in b_set) / longest


def calculate_topic_delta(topic: Topic, snapshot: Optional[Snapshot]) -> int:
    """1 if the topic is new since the snapshot, else 0 (0 without a snapshot)."""
    if snapshot is None:
        return 0
    best = max(
        (keyword_overlap(topic.keywords, prior.keywords) for prior in snapshot.top_topics),
        default=0.0,
    )
    return 1 if best < NEW_TOPIC_OVERLAP else 0


def apply_topic_deltas(topics: List[Topic], snapshot: Optional[Snapshot]) -> List[Topic]:
    """Copies of topics with delta filled in."""
    updated = [t.model_copy(update={"delta": calculate_topic_delta(t, snapshot)}) for t in topics]
    if snapshot is not None:
        new = sum(t.delta for t in updated)
        logger.info(f"Topic deltas vs {snapshot.date}: {new}/{len(updated)} new")
    return updated


# ══════════════════════════════════════════════════════════════════════════════
# SNAPSHOTS
# ══════════════════════════════════════════════════════════════════════════════

def build_snapshot(
    date_string: str,
    tension_index: int,
    emotions: EmotionDistribution,
    topics: List[Topic],
    llm_outputs: Optional[Dict[str, str]] = None,
) -> Snapshot:
    """Abbreviate today's result. Keeps the first 10 topics in the given order."""
    return Snapshot(
        date=date_string,
        tension_index=tension_index,
        emotions=emotions,
        top_topics=[
            SnapshotTopic(keywords=list(t.keywords), item_ids=list(t.member_ids))
            for t in topics[:SNAPSHOT_TOPIC_LIMIT]
        ],
        llm_outputs=dict(llm_outputs or {}),
    )


def parse_snapshot_payload(payload: Any) -> Optional[Snapshot]:
    """
    Validate a raw stored snapshot (dict or JSON string).

    Structurally invalid payloads are treated as absent: logged at WARNING
    and returned as None, so a corrupt row only costs the deltas.
    """
    if payload is None:
        return None
    if isinstance(payload, Snapshot):
        return payload
    try:
        if isinstance(payload, (str, bytes)):
            return Snapshot.model_validate_json(payload)
        return Snapshot.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid snapshot payload ({e.error_count()} errors): {e.errors()[:3]}")
        return None


class InMemorySnapshotStore:
    """Dict-backed SnapshotStore. Raw payloads are validated on load."""

    def __init__(self, payloads: Optional[Mapping[str, Any]] = None):
        self._payloads: Dict[str, Any] = dict(payloads or {})

    def __len__(self) -> int:
        return len(self._payloads)

    def __contains__(self, date_string: str) -> bool:
        return date_string in self._payloads

    def save(self, snapshot: Snapshot) -> None:
        """Upsert by date."""
        self._payloads[snapshot.date] = snapshot
        logger.debug(f"Snapshot saved for {snapshot.date}")

    def load(self, date_string: str) -> Optional[Snapshot]:
        return parse_snapshot_payload(self._payloads.get(date_string))

    def load_prior_day(self, date_string: str) -> Optional[Snapshot]:
        """Snapshot of the day before `date_string` (YYYY-MM-DD)."""
        today = date.fromisoformat(date_string)
        return self.load(get_yesterday_date_string(today))

    def prune(self, keep_days: int = DEFAULT_KEEP_DAYS, today: Optional[DateLike] = None) -> int:
        """Drop snapshots dated before today − keep_days. Returns how many were removed."""
        if today is None:
            today = datetime.now(timezone.utc)
        if isinstance(today, datetime):
            today = today.date()
        cutoff = get_date_string(today - timedelta(days=keep_days))

        # YYYY-MM-DD strings order chronologically
        stale = [d for d in self._payloads if d < cutoff]
        for d in stale:
            del self._payloads[d]
        if stale:
            logger.info(f"Pruned {len(stale)} snapshots older than {cutoff}")
        return len(stale)
