"""
Similarity-based deduplication for content items.

DEDUP PASS (single pass, highest engagement first):
  1. URL CHECK:    normalized URL already accepted → duplicate (O(1) set lookup)
  2. SIMILARITY:   pairwise score against every accepted item; ≥ threshold →
                   duplicate of that item

SIMILARITY LADDER (calculate_similarity, first matching rule wins):
  same normalized URL                             → 1.0
  title prefix (first 30 chars of a >20-char title
    contained in the other title)                 → max(title, 0.85)
  title > 0.5 and same domain                     → max(title, 0.8)
  title > 0.3 and same story (entities/phrases)   → max(title, 0.75)
  title > 0.4                                     → blend with body Jaccard
  otherwise                                       → title Jaccard

The prefix rule catches "Headline" vs "Headline - Publisher Name"
syndication. The same-story rule catches one event reported by different
outlets with different wording, as long as they share names/numbers or
several 3-word phrases.

WHY exact pairwise (not MinHash LSH):
  Batches are a few hundred items per window, so O(n²) comparisons stay in
  the low milliseconds and the result is exact and reproducible.

Sorting is stable, so equal-engagement items keep their input order and
deduplicate(deduplicate(X)) == deduplicate(X).
"""

import logging
import re
from typing import Dict, List, Optional, Set, Tuple

from pulse.errors import check_unit_interval
from pulse.schemas import ContentItem
from pulse.shared.stopwords import PHRASE_STOP
from pulse.shared.text import jaccard, word_set
from pulse.shared.urls import extract_domain, normalize_url

logger = logging.getLogger(__name__)

DEFAULT_DEDUP_THRESHOLD = 0.5

# Entity patterns for same-story detection
_NUMBERS = re.compile(r"\b\d+(?:\.\d+)?%?\b")
_CAPITALIZED = re.compile(r"\b[A-Z][a-z]{2,}\b")
_QUOTED = re.compile(r'"([^"]+)"')
_TITLES = re.compile(r"(?:president|pm|minister|ceo|cfo)\s+\w+", re.IGNORECASE)
_HONORIFICS = re.compile(r"(?:mr\.|mrs\.|dr\.|prof\.)\s+\w+", re.IGNORECASE)

_PHRASE_SPLIT = re.compile(r"[^\w\s]|_")

# Similarity floors per rule
PREFIX_FLOOR = 0.85
SAME_DOMAIN_FLOOR = 0.8
SAME_STORY_FLOOR = 0.75
BODY_MATCH_FLOOR = 0.7


# ══════════════════════════════════════════════════════════════════════════════
# SAME-STORY HEURISTICS
# ══════════════════════════════════════════════════════════════════════════════

def extract_key_entities(text: str) -> Set[str]:
    """
    Names, numbers and quotes that identify a story.

    Captures: numbers ("3.5", "2024"), capitalized words ("Netanyahu"),
    quoted phrases, "<title> <name>" ("president biden") and honorifics
    ("dr. cohen"). Everything except numbers is lowercased.
    """
    entities: Set[str] = set()
    entities.update(_NUMBERS.findall(text))
    entities.update(w.lower() for w in _CAPITALIZED.findall(text))
    entities.update(q.lower() for q in _QUOTED.findall(text))
    entities.update(m.lower() for m in _TITLES.findall(text))
    entities.update(m.lower() for m in _HONORIFICS.findall(text))
    return entities


def extract_phrases(text: str) -> List[str]:
    """3-word windows whose first and last words are not stopwords (len > 10)."""
    words = [w for w in _PHRASE_SPLIT.sub(" ", text.lower()).split() if len(w) > 2]

    phrases = []
    for i in range(len(words) - 2):
        if words[i] in PHRASE_STOP or words[i + 2] in PHRASE_STOP:
            continue
        phrase = f"{words[i]} {words[i + 1]} {words[i + 2]}"
        if len(phrase) > 10:
            phrases.append(phrase)
    return phrases


def is_same_story(a: ContentItem, b: ContentItem) -> bool:
    """
    Two items describe the same event.

    True when ≥60% of the smaller entity set is shared (and at least 3
    entities), or when the texts share ≥2 meaningful 3-word phrases.
    Items with fewer than 2 entities are never judged the same story.
    """
    text_a, text_b = a.combined_text, b.combined_text

    entities_a = extract_key_entities(text_a)
    entities_b = extract_key_entities(text_b)
    if len(entities_a) < 2 or len(entities_b) < 2:
        return False

    shared = entities_a & entities_b
    overlap = len(shared) / min(len(entities_a), len(entities_b))
    if overlap >= 0.6 and len(shared) >= 3:
        return True

    phrases_b = set(extract_phrases(text_b))
    shared_phrases = [p for p in extract_phrases(text_a) if p in phrases_b]
    return len(shared_phrases) >= 2


# ══════════════════════════════════════════════════════════════════════════════
# PAIRWISE SIMILARITY
# ══════════════════════════════════════════════════════════════════════════════

def calculate_similarity(a: ContentItem, b: ContentItem) -> float:
    """Duplicate likelihood in [0, 1]; 1.0 means the same resource."""
    if a.url and b.url and normalize_url(a.url) == normalize_url(b.url):
        return 1.0

    title_sim = jaccard(word_set(a.title), word_set(b.title))

    lower_a, lower_b = a.title.lower(), b.title.lower()
    if (len(lower_a) > 20 and lower_a[:30] in lower_b) or (
        len(lower_b) > 20 and lower_b[:30] in lower_a
    ):
        return max(title_sim, PREFIX_FLOOR)

    if title_sim > 0.5:
        domain_a, domain_b = extract_domain(a.url), extract_domain(b.url)
        if domain_a and domain_a == domain_b:
            return max(title_sim, SAME_DOMAIN_FLOOR)

    if title_sim > 0.3 and is_same_story(a, b):
        return max(title_sim, SAME_STORY_FLOOR)

    if title_sim > 0.4:
        text_sim = jaccard(word_set(a.text or ""), word_set(b.text or ""))
        if text_sim > 0.5:
            return max(title_sim * 0.4 + text_sim * 0.6, BODY_MATCH_FLOOR)
        return title_sim * 0.7 + text_sim * 0.3

    return title_sim


# ══════════════════════════════════════════════════════════════════════════════
# DEDUPLICATOR
# ══════════════════════════════════════════════════════════════════════════════

class ItemDeduplicator:
    """
    Pairwise dedup engine. Keeps the highest-engagement version of each story.

    Two output shapes over the same decision:
      deduplicate(items)     → survivors only (engagement-descending order)
      mark_duplicates(items) → every item, suppressed ones carry duplicate_of
    """

    def __init__(self, threshold: float = DEFAULT_DEDUP_THRESHOLD):
        """
        Args:
            threshold: Similarity at or above which an item is a duplicate.
                       0.5 = moderate (same headline reworded, syndicated copies).
                       0.8 catches only near-identical items.
        """
        self.threshold = check_unit_interval("threshold", threshold)

    def _resolve(self, items: List[ContentItem]) -> Tuple[List[int], Dict[int, str]]:
        """Return (survivor positions, {suppressed position: representative id}).

        Keyed by position, not id: same-source items sharing a URL share an id.
        """
        survivors: List[int] = []
        representative_of: Dict[int, str] = {}
        seen_urls: Dict[str, str] = {}
        url_dups = 0
        dup_examples = []

        # sorted() is stable: equal engagement keeps input order
        order = sorted(range(len(items)), key=lambda k: items[k].engagement, reverse=True)
        for k in order:
            item = items[k]
            normalized = normalize_url(item.url) if item.url else ""
            if normalized and normalized in seen_urls:
                representative_of[k] = seen_urls[normalized]
                url_dups += 1
                continue

            match: Optional[ContentItem] = None
            for s in survivors:
                if calculate_similarity(item, items[s]) >= self.threshold:
                    match = items[s]
                    break

            if match is not None:
                representative_of[k] = match.id
                if len(dup_examples) < 5:
                    dup_examples.append({"removed": item.title[:50], "kept": match.title[:50]})
                continue

            survivors.append(k)
            if normalized:
                seen_urls[normalized] = item.id

        removed = len(items) - len(survivors)
        if removed > 0:
            logger.info(
                f"Dedup: {len(items)} → {len(survivors)} "
                f"(removed {removed} = {removed / len(items) * 100:.1f}%, {url_dups} by URL)"
            )
            logger.debug(f"  Dedup examples: {dup_examples}")
        return survivors, representative_of

    def deduplicate(self, items: List[ContentItem]) -> List[ContentItem]:
        if not items:
            return []
        survivors, _ = self._resolve(items)
        return [items[k] for k in survivors]

    def mark_duplicates(self, items: List[ContentItem]) -> List[ContentItem]:
        """Set duplicate_of in place on every suppressed item; returns all items in input order."""
        if not items:
            return []
        _, representative_of = self._resolve(items)
        for k, rep in representative_of.items():
            items[k].duplicate_of = rep
        return items


def deduplicate(items: List[ContentItem], threshold: float = DEFAULT_DEDUP_THRESHOLD) -> List[ContentItem]:
    """Drop near-duplicates, keeping the highest-engagement version of each."""
    return ItemDeduplicator(threshold).deduplicate(items)


def mark_duplicates(items: List[ContentItem], threshold: float = DEFAULT_DEDUP_THRESHOLD) -> List[ContentItem]:
    """Flag near-duplicates with duplicate_of instead of dropping them."""
    return ItemDeduplicator(threshold).mark_duplicates(items)
