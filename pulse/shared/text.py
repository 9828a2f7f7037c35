"""
Tokenizers shared by dedup and clustering.

Two flavours, matching how each stage compares text:
  - word_set():     dedup tokens. Punctuation is deleted (so "U.S." → "us"),
                    tokens of length ≤ 2 dropped, no stopword filter.
  - extract_terms(): TF-IDF terms. Punctuation becomes a separator, tokens of
                    length ≤ 1 and English/Hebrew stopwords dropped.

Both keep Unicode letters and digits, so Hebrew and Cyrillic survive.
"""

import re
from typing import List, Set

from pulse.shared.stopwords import is_stopword

# Anything that is not a letter, digit or whitespace (`\w` minus underscore)
_NON_WORD = re.compile(r"[^\w\s]|_")


def word_set(text: str) -> Set[str]:
    """Lowercase word set for Jaccard comparisons."""
    cleaned = _NON_WORD.sub("", (text or "").lower())
    return {w for w in cleaned.split() if len(w) > 2}


def extract_terms(text: str) -> List[str]:
    """Ordered list of index terms (duplicates kept, for term frequency)."""
    cleaned = _NON_WORD.sub(" ", (text or "").lower())
    return [t for t in cleaned.split() if len(t) > 1 and not is_stopword(t)]


def jaccard(a: Set[str], b: Set[str]) -> float:
    """|A ∩ B| / |A ∪ B|; two empty sets are 0.0, not 1.0."""
    if not a and not b:
        return 0.0
    return len(a & b) / len(a | b)
