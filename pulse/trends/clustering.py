"""
Greedy TF-IDF clustering of deduplicated items into trending topics.

ALGORITHM:
  1. Vectorize `title + text` of every non-duplicate item (vectorizer.py).
  2. Single greedy pass: each unassigned item seeds a cluster and absorbs
     every LATER unassigned item whose cosine similarity to the seed is
     ≥ similarity_threshold. Members are compared to the seed only, never
     to each other or to a centroid.
  3. Drop clusters smaller than min_cluster_size.
  4. Score each cluster: weight = Σ item weight (recency × log-engagement ×
     relevance), keywords = top summed tf-idf terms, emotion mix = weighted
     emotion aggregate of the members.
  5. Sort by weight (desc), keep max_topics.

ORDER DEPENDENCE:
  The greedy pass depends on input order: whichever item comes first becomes
  the seed, and a later item similar to two seeds joins the first one. Pass
  stable_order=True to sort by item id first, which makes the output
  independent of arrival order.

PERFORMANCE:
  O(n²) cosine comparisons on a dense matrix. A few hundred items per
  window cluster in well under a second.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from pulse.config import PulseConfig
from pulse.schemas import (
    PENDING_EXPLANATION,
    ContentItem,
    Location,
    Receipt,
    Topic,
)
from pulse.mood.emotions import aggregate_with_config
from pulse.mood.weighting import item_weight
from pulse.shared.hashing import generate_id
from pulse.trends.keywords import keyword_title, top_keywords
from pulse.trends.vectorizer import build_tfidf

logger = logging.getLogger(__name__)


def greedy_clusters(similarity: np.ndarray, threshold: float) -> List[List[int]]:
    """Seed-based single-pass grouping over a square similarity matrix."""
    n = similarity.shape[0]
    assigned = np.zeros(n, dtype=bool)
    clusters = []

    for i in range(n):
        if assigned[i]:
            continue
        cluster = [i]
        assigned[i] = True
        for j in range(i + 1, n):
            if not assigned[j] and similarity[i, j] >= threshold:
                cluster.append(j)
                assigned[j] = True
        clusters.append(cluster)

    return clusters


def items_to_receipts(
    items: Sequence[ContentItem],
    max_items: Optional[int] = None,
    use_context: bool = False,
) -> List[Receipt]:
    """Top items by engagement (stable) projected to receipts."""
    ranked = sorted(items, key=lambda i: i.engagement, reverse=True)
    if max_items is not None:
        ranked = ranked[:max_items]
    return [Receipt.from_item(i, use_context=use_context) for i in ranked]


def cluster_into_topics(
    items: List[ContentItem],
    config: Optional[PulseConfig] = None,
    now: Optional[datetime] = None,
    stable_order: bool = False,
    max_topics: Optional[int] = None,
    min_cluster_size: Optional[int] = None,
) -> List[Topic]:
    """
    Cluster items into at most max_topics topics of at least min_cluster_size.

    Args:
        items: Items to cluster. Items with duplicate_of set are ignored.
        config: Run configuration (defaults to PulseConfig()).
        now: Reference time for recency weighting (defaults to wall clock).
        stable_order: Sort by item id before clustering for reproducibility.
        max_topics / min_cluster_size: Per-call overrides, validated like
            the config fields (PulseConfigError on bad values).
    """
    config = (config or PulseConfig()).with_overrides(
        max_topics=max_topics, min_cluster_size=min_cluster_size,
    )

    unique = [i for i in items if not i.duplicate_of]
    if not unique:
        return []
    if stable_order:
        unique.sort(key=lambda i: i.id)

    vectors = build_tfidf([i.combined_text for i in unique])
    raw_clusters = greedy_clusters(vectors.similarity(), config.similarity_threshold)

    scored = []
    for members in raw_clusters:
        if len(members) < config.min_cluster_size:
            continue
        cluster_items = [unique[k] for k in members]
        weight = sum(
            item_weight(
                i, config.recency_half_life_hours, config.engagement_cap,
                config.default_relevance, now,
            )
            for i in cluster_items
        )
        scored.append((weight, members, cluster_items))

    # sort() is stable: equal weights keep discovery order
    scored.sort(key=lambda s: s[0], reverse=True)
    scored = scored[:config.max_topics]

    topics = []
    for weight, members, cluster_items in scored:
        keywords = top_keywords(vectors, members, config.keywords_per_topic)
        topics.append(Topic(
            id=generate_id("topic:" + ":".join(keywords)),
            title=keyword_title(keywords),
            keywords=keywords,
            why_trending=PENDING_EXPLANATION,
            emotion_mix=aggregate_with_config(cluster_items, config, now),
            weight=weight,
            delta=0,
            receipts=items_to_receipts(cluster_items, config.receipts_per_topic),
            member_ids=[i.id for i in cluster_items],
        ))

    if len(raw_clusters) == len(unique) and len(unique) > 1:
        logger.warning(f"Clustering: no two of {len(unique)} items reached similarity {config.similarity_threshold}")
    logger.info(
        f"Clustering: {len(unique)} items → {len(raw_clusters)} clusters "
        f"→ {len(topics)} topics (min size {config.min_cluster_size}, "
        f"{vectors.n_terms} terms)"
    )
    return topics


def find_unclustered_items(
    items: List[ContentItem],
    topics: List[Topic],
    max_items: int = 10,
) -> List[ContentItem]:
    """Non-duplicate items shown in no topic's receipts, by engagement (desc)."""
    clustered_ids = {r.id for t in topics for r in t.receipts}
    leftovers = [i for i in items if not i.duplicate_of and i.id not in clustered_ids]
    leftovers.sort(key=lambda i: i.engagement, reverse=True)
    return leftovers[:max_items]


def add_locations_to_topics(topics: List[Topic]) -> List[Topic]:
    """Copies of topics with the unique receipt locations (keyed by lat,lng)."""
    result = []
    for topic in topics:
        locations: List[Location] = []
        seen = set()
        for receipt in topic.receipts:
            loc = receipt.location
            if loc is None:
                continue
            key = (loc.lat, loc.lng)
            if key not in seen:
                seen.add(key)
                locations.append(loc)
        result.append(topic.model_copy(update={"locations": locations or None}))
    return result
