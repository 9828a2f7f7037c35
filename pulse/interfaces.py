"""
Collaborator protocols for the pulse core.

The core performs no I/O. Anything that would (loading keyword lists,
looking up source trust, persisting snapshots, calling an LLM) is expressed
as a Protocol here and handed in by the caller. Default in-process
implementations are provided where a sensible one exists.
"""

import logging
from typing import Dict, List, Optional, Protocol

from pulse.config import DEFAULT_SOURCE_TRUST
from pulse.schemas import Snapshot, Topic, TopicEnrichment
from pulse.trends.keywords import keyword_title

logger = logging.getLogger(__name__)


# =============================================================================
# PROTOCOLS
# =============================================================================

class KeywordProvider(Protocol):
    """
    Protocol for region/geo keyword lists used by relevance scoring.

    Called once per run; the result is bound into a RelevanceScorer or
    PulseConfig, never cached globally.
    """
    def get_keywords(self) -> List[str]:
        ...


class SourceRegistry(Protocol):
    """Protocol for per-source-type trust lookup."""
    def trust_for(self, source: str) -> Optional[float]:
        """Trust score in [0, 1], or None for an unknown source type."""
        ...


class SnapshotStore(Protocol):
    """
    Protocol for daily snapshot persistence.

    load_prior_day returns None when nothing (valid) is stored for the date.
    """
    def load_prior_day(self, date: str) -> Optional[Snapshot]:
        ...

    def save(self, snapshot: Snapshot) -> None:
        ...


class TopicEnricher(Protocol):
    """Protocol for external topic explanation (e.g. an LLM)."""
    def enrich(self, topic: Topic) -> Optional[TopicEnrichment]:
        """Human-readable title + why-trending text, or None to keep the keyword title."""
        ...


# =============================================================================
# DEFAULT IMPLEMENTATIONS
# =============================================================================

class StaticKeywordProvider:
    """Fixed keyword list (tests, scripts, env-configured keywords)."""

    def __init__(self, keywords: List[str]):
        self._keywords = list(keywords)

    def get_keywords(self) -> List[str]:
        return list(self._keywords)


class StaticSourceRegistry:
    """Trust table held in memory. Defaults to DEFAULT_SOURCE_TRUST."""

    def __init__(self, trust: Optional[Dict[str, float]] = None):
        self._trust = dict(DEFAULT_SOURCE_TRUST if trust is None else trust)

    def trust_for(self, source: str) -> Optional[float]:
        return self._trust.get(source)


class KeywordTitleEnricher:
    """Fallback enricher: capitalized top-3 keywords joined with " / "."""

    def enrich(self, topic: Topic) -> Optional[TopicEnrichment]:
        if not topic.keywords:
            return None
        return TopicEnrichment(title=keyword_title(topic.keywords))

