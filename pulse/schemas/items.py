"""
Content item and receipt models.

These models represent the raw material of the pipeline: items produced by
external collectors (search results, feeds, forum threads, event listings)
and the bounded evidence projection ("receipt") shown next to each topic.

Lifecycle: collector → ContentItem → relevance (sets relevance_score)
→ dedup (drops, or sets duplicate_of in the mark variant) → read-only for
clustering and aggregation.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from pulse.shared.hashing import generate_id

from .base import EventType, Language, Lens, Location, SourceType


class ContentItem(BaseModel):
    """
    Normalized item from any source.

    This is the atomic unit of the pipeline. `engagement` is the
    platform-specific score/comment count and is intentionally uncapped here;
    weighting code applies the configured cap.
    """
    id: str = ""

    # Source attribution
    source: SourceType = SourceType.SEARCH
    lens: Lens = Lens.HEADLINES
    language: Language = Language.EN
    context: str = ""  # feed name / subreddit / thread / channel

    # Core content
    title: str
    text: Optional[str] = None
    url: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    engagement: int = Field(default=0, ge=0)

    # Enrichment (set in place by relevance scoring and dedup)
    relevance_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    duplicate_of: Optional[str] = None

    # Optional presentation/evidence fields
    location: Optional[Location] = None
    favicon_url: Optional[str] = None
    image_url: Optional[str] = None
    event_type: Optional[EventType] = None
    event_date: Optional[datetime] = None
    event_end_date: Optional[datetime] = None
    venue: Optional[str] = None
    mood_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)

    class Config:
        use_enum_values = True
        validate_default = True

    @field_validator("created_at", mode="after")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def fill_stable_id(self):
        if not self.id:
            self.id = generate_id(f"{self.source}:{self.url or self.title}")
        return self

    @property
    def combined_text(self) -> str:
        """`title + " " + text`, the string every scorer reads."""
        return f"{self.title} {self.text or ''}"

    @property
    def is_duplicate(self) -> bool:
        return bool(self.duplicate_of)


class Receipt(BaseModel):
    """Bounded, UI-facing projection of an item used as evidence for a topic."""
    id: str
    title: str
    snippet: str = ""
    url: str = ""
    source: str = ""
    language: str = Language.EN.value
    engagement: int = 0
    created_at: datetime

    location: Optional[Location] = None
    favicon_url: Optional[str] = None
    image_url: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    venue: Optional[str] = None
    mood_score: Optional[float] = None

    @classmethod
    def from_item(cls, item: ContentItem, use_context: bool = False) -> "Receipt":
        """Project an item. `use_context` labels the receipt with the feed name."""
        source = item.context if (use_context and item.context) else item.source
        return cls(
            id=item.id,
            title=item.title,
            snippet=item.text or "",
            url=item.url,
            source=source,
            language=item.language,
            engagement=item.engagement,
            created_at=item.created_at,
            location=item.location,
            favicon_url=item.favicon_url,
            image_url=item.image_url,
            event_type=item.event_type,
            event_date=item.event_date,
            venue=item.venue,
            mood_score=item.mood_score,
        )
