"""
Stage 1-2: relevance scoring and deduplication of incoming items.

Modules:
- relevance: source trust + region keyword scoring (RelevanceScorer)
- dedup: URL + pairwise similarity near-duplicate removal (ItemDeduplicator)
"""

from pulse.news.relevance import RelevanceScorer, score_relevance, filter_by_relevance
from pulse.news.dedup import (
    ItemDeduplicator,
    calculate_similarity,
    deduplicate,
    mark_duplicates,
)
