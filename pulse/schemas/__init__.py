"""
Schemas package: all data models for the pulse core.

Models are organized by concern in submodules:
  - base.py: Enums (Emotion, SourceType, Lens, Language) and Location
  - items.py: ContentItem, Receipt
  - mood.py: EmotionDistribution, EmotionDelta, EmotionWithDelta, RegionMood
  - topics.py: Topic, TopicEnrichment, Snapshot, SnapshotTopic, PulseResult
"""

# base.py: enums and value objects
from pulse.schemas.base import (
    Emotion, EMOTIONS, NON_NEUTRAL_EMOTIONS,
    SourceType, Lens, Language, EventType, Location,
)

# items.py: input items and evidence projections
from pulse.schemas.items import ContentItem, Receipt

# mood.py: emotion records
from pulse.schemas.mood import (
    EmotionDistribution, EmotionDelta, EmotionWithDelta, RegionMood,
)

# topics.py: clustering output, snapshots, run result
from pulse.schemas.topics import (
    Topic, TopicEnrichment, Snapshot, SnapshotTopic, PulseResult,
    SNAPSHOT_TOPIC_LIMIT, PENDING_EXPLANATION,
)

__all__ = [
    # base
    "Emotion", "EMOTIONS", "NON_NEUTRAL_EMOTIONS",
    "SourceType", "Lens", "Language", "EventType", "Location",
    # items
    "ContentItem", "Receipt",
    # mood
    "EmotionDistribution", "EmotionDelta", "EmotionWithDelta", "RegionMood",
    # topics
    "Topic", "TopicEnrichment", "Snapshot", "SnapshotTopic", "PulseResult",
    "SNAPSHOT_TOPIC_LIMIT", "PENDING_EXPLANATION",
]
