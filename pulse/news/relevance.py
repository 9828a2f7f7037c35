"""
Relevance scoring: how strongly an item relates to the configured regions.

SCORE (0-1):
  trust      = source trust (unknown source type → 0.5)      × 0.3
  keywords   = min(1, matching_keywords / 3)                  × 0.5
  search     = +0.1 when the item came from the search collector
  clamp to [0, 1]

Keyword matching is case-insensitive substring containment over
`title + " " + text`. Three distinct keyword hits saturate the keyword term.

The keyword list is injected (RelevanceScorer / PulseConfig). Nothing is
cached at module level.
"""

import logging
from typing import Dict, List, Optional, Sequence

from pulse.config import DEFAULT_SOURCE_TRUST, DEFAULT_TRUST, PulseConfig
from pulse.errors import check_unit_interval
from pulse.interfaces import SourceRegistry, StaticSourceRegistry
from pulse.schemas import ContentItem, SourceType

logger = logging.getLogger(__name__)

TRUST_WEIGHT = 0.3
KEYWORD_WEIGHT = 0.5
KEYWORDS_TO_SATURATE = 3


def score_relevance(
    item: ContentItem,
    keywords: Sequence[str],
    source_trust: Optional[Dict[str, float]] = None,
    search_boost: float = 0.1,
) -> float:
    """
    Score one item. Pure: no state is read or written.

    Args:
        item: Item to score.
        keywords: Region keywords (any case).
        source_trust: Trust per source type. Defaults to DEFAULT_SOURCE_TRUST.
        search_boost: Added for items from the search collector.
    """
    trust_table = DEFAULT_SOURCE_TRUST if source_trust is None else source_trust
    trust = trust_table.get(item.source, DEFAULT_TRUST)
    return _score(item, [k.lower() for k in keywords], trust, search_boost)


def _score(item: ContentItem, lowered_keywords: List[str], trust: float, search_boost: float) -> float:
    score = trust * TRUST_WEIGHT

    combined = item.combined_text.lower()
    matches = sum(1 for k in lowered_keywords if k and k in combined)
    score += min(1.0, matches / KEYWORDS_TO_SATURATE) * KEYWORD_WEIGHT

    if item.source == SourceType.SEARCH.value:
        score += search_boost

    return max(0.0, min(1.0, score))


class RelevanceScorer:
    """
    Relevance scorer bound to one run's keyword list and source registry.

    Usage:
        scorer = RelevanceScorer(provider.get_keywords())
        scorer.score_items(items)          # sets item.relevance_score
        kept = filter_by_relevance(items, 0.3, scorer)
    """

    def __init__(
        self,
        keywords: Sequence[str] = (),
        registry: Optional[SourceRegistry] = None,
        search_boost: float = 0.1,
    ):
        self.keywords = [k.lower() for k in keywords if k]
        self.registry = registry or StaticSourceRegistry()
        self.search_boost = search_boost

    @classmethod
    def from_config(cls, config: PulseConfig) -> "RelevanceScorer":
        return cls(
            keywords=config.relevance_keywords,
            registry=StaticSourceRegistry(config.source_trust),
            search_boost=config.search_boost,
        )

    def score(self, item: ContentItem) -> float:
        trust = self.registry.trust_for(item.source)
        if trust is None:
            trust = DEFAULT_TRUST
        return _score(item, self.keywords, trust, self.search_boost)

    def score_items(self, items: List[ContentItem]) -> List[ContentItem]:
        """Set `relevance_score` on every item in place; returns the same list."""
        for item in items:
            item.relevance_score = self.score(item)

        if items:
            avg = sum(i.relevance_score for i in items) / len(items)
            logger.info(
                f"Relevance: scored {len(items)} items "
                f"(avg {avg:.2f}, {len(self.keywords)} keywords)"
            )
        return items


def filter_by_relevance(
    items: List[ContentItem],
    min_score: float = 0.3,
    scorer: Optional[RelevanceScorer] = None,
) -> List[ContentItem]:
    """Keep items whose stored (or freshly computed) relevance is ≥ min_score."""
    check_unit_interval("min_score", min_score)
    scorer = scorer or RelevanceScorer()

    kept = []
    for item in items:
        score = item.relevance_score if item.relevance_score is not None else scorer.score(item)
        if score >= min_score:
            kept.append(item)

    logger.debug(f"Relevance filter (≥{min_score}): {len(items)} → {len(kept)}")
    return kept
