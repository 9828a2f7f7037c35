"""
Common enums and value objects used across the pulse core.

These are foundational types that don't belong to any single stage of the
pipeline. They define the vocabulary of the system: where an item came from,
which language it is in, which emotion categories exist, and where it
happened.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


# ══════════════════════════════════════════════════════════════════════════════
# ENUMS - Classification Types
# ══════════════════════════════════════════════════════════════════════════════

class Emotion(str, Enum):
    """The 8 emotion categories. NEUTRAL absorbs items with no emotional signal."""
    ANGER = "anger"
    ANXIETY = "anxiety"
    SADNESS = "sadness"
    RESILIENCE = "resilience"
    HOPE = "hope"
    EXCITEMENT = "excitement"
    CYNICISM = "cynicism"
    NEUTRAL = "neutral"


# Canonical category order. Tie-breaks (dominant emotion) follow this order.
EMOTIONS: List[Emotion] = list(Emotion)

NON_NEUTRAL_EMOTIONS: List[Emotion] = [e for e in EMOTIONS if e is not Emotion.NEUTRAL]


class SourceType(str, Enum):
    """Collector that produced an item."""
    RSS = "rss"
    REDDIT = "reddit"
    HN = "hn"
    TELEGRAM = "telegram"
    EVENTS = "events"
    SEARCH = "search"


class Lens(str, Enum):
    """Editorial lens an item is shown under."""
    HEADLINES = "Headlines"
    CONVERSATION = "Conversation"
    WEATHER = "Weather"
    TECH = "Tech"
    EVENTS = "Events"


class Language(str, Enum):
    """Content language tag."""
    HE = "he"
    EN = "en"
    RU = "ru"
    OTHER = "other"


class EventType(str, Enum):
    """Category for cultural/community events (events source only)."""
    CONCERT = "concert"
    THEATER = "theater"
    SPORTS = "sports"
    FESTIVAL = "festival"
    PROTEST = "protest"
    EXHIBITION = "exhibition"
    NIGHTLIFE = "nightlife"
    COMMUNITY = "community"
    OTHER = "other"


# ══════════════════════════════════════════════════════════════════════════════
# VALUE OBJECTS - Immutable, Reusable
# ══════════════════════════════════════════════════════════════════════════════

class Location(BaseModel):
    """Geographic location attached by an upstream geocoder."""
    name: str
    lat: float
    lng: float
    country: Optional[str] = None
    region: Optional[str] = None

    class Config:
        frozen = True
