"""
Consolidated stopword sets: single source for tokenization filters.

Used by:
  - pulse.trends.vectorizer (TF-IDF term filter, English + Hebrew)
  - pulse.news.dedup (3-word phrase filter for same-story detection)
"""
from __future__ import annotations

import re
import unicodedata

# English function words plus newswire filler ("said", "reports", ...).
ENGLISH_STOP = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "as", "is", "was", "are", "were", "been", "be",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "this", "that", "these", "those",
    "it", "its", "he", "she", "they", "we", "you", "who", "what", "where",
    "when", "why", "how", "all", "each", "every", "both", "few", "more",
    "most", "other", "some", "such", "no", "not", "only", "same", "so",
    "than", "too", "very", "just", "also", "now", "new", "said", "says",
    "according", "report", "reports", "reported", "after", "before",
})

# Hebrew prepositions, pronouns and single-letter prefixes.
HEBREW_STOP = frozenset({
    "של", "את", "על", "עם", "אל", "מן", "לא", "הוא", "היא", "הם", "הן",
    "אני", "אתה", "זה", "זו", "אלה", "כל", "גם", "רק", "כי", "אם", "או",
    "אבל", "עד", "כן", "לו", "לי", "לך", "להם", "בו",
    "ב", "ל", "מ", "ה", "ו", "כ", "ש",
})

# Phrase-window stopwords: a 3-word window starting or ending with one of
# these is not a meaningful phrase.
PHRASE_STOP = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "has",
    "have", "was", "were", "been", "being", "will", "would", "could",
    "should", "that", "this", "with", "from", "they", "which", "their",
    "there", "what", "about", "into", "more", "other", "than", "then",
    "these", "some",
})

_HEBREW_FINALS = str.maketrans({"ך": "כ", "ם": "מ", "ן": "נ", "ף": "פ", "ץ": "צ"})
_NIQQUD = re.compile(r"[\u0591-\u05C7]")
_HEBREW_CHAR = re.compile(r"[\u0590-\u05FF]")


def normalize_hebrew(text: str) -> str:
    """Strip niqqud/cantillation marks and fold final letters to base forms."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = unicodedata.normalize("NFC", _NIQQUD.sub("", decomposed))
    return stripped.translate(_HEBREW_FINALS)


def is_hebrew(token: str) -> bool:
    return bool(_HEBREW_CHAR.search(token))


_HEBREW_STOP_NORMALIZED = frozenset(normalize_hebrew(w) for w in HEBREW_STOP)


def is_stopword(token: str) -> bool:
    """English check on the raw lowercase token, Hebrew check after normalization."""
    if token in ENGLISH_STOP:
        return True
    if is_hebrew(token):
        return normalize_hebrew(token) in _HEBREW_STOP_NORMALIZED
    return False
