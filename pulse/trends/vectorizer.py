"""
TF-IDF document vectors for topic clustering.

FORMULA:
  tf(t, d)  = count(t, d) / max_t' count(t', d)       (max-normalized)
  idf(t)    = ln(N / (df(t) + 1)) + 1
  w(t, d)   = tf(t, d) × idf(t)

The term axis is the sorted vocabulary, so column order (and every tie-break
that follows it) is independent of item order.

WHY hand-built instead of sklearn's TfidfVectorizer:
  TfidfVectorizer's tf is raw counts and its smoothed idf is
  ln((1+N)/(1+df)) + 1. Topic keywords and the 0.25 clustering threshold are
  tuned to the max-normalized tf and ln(N/(df+1)) + 1 idf above.
"""

import logging
from collections import Counter
from typing import List, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from pulse.shared.text import extract_terms

logger = logging.getLogger(__name__)


class TfidfMatrix:
    """Dense (n_docs × n_terms) tf-idf matrix with its sorted vocabulary."""

    def __init__(self, terms: List[str], matrix: np.ndarray):
        self.terms = terms
        self.matrix = matrix

    @property
    def n_docs(self) -> int:
        return self.matrix.shape[0]

    @property
    def n_terms(self) -> int:
        return len(self.terms)

    def similarity(self) -> np.ndarray:
        """Pairwise cosine similarity (n_docs × n_docs). Zero-norm rows score 0."""
        if self.n_terms == 0:
            # sklearn rejects 0-feature input; no shared terms means no similarity
            return np.zeros((self.n_docs, self.n_docs))
        return cosine_similarity(self.matrix)


def term_frequencies(text: str) -> dict:
    """Max-normalized term frequencies of one document."""
    counts = Counter(extract_terms(text))
    if not counts:
        return {}
    max_count = max(counts.values())
    return {term: count / max_count for term, count in counts.items()}


def build_tfidf(texts: Sequence[str]) -> TfidfMatrix:
    """Vectorize documents over their joint sorted vocabulary."""
    documents = [term_frequencies(t) for t in texts]
    n_docs = len(documents)

    doc_freq: Counter = Counter()
    for tf in documents:
        doc_freq.update(tf.keys())

    terms = sorted(doc_freq)
    column = {term: j for j, term in enumerate(terms)}
    idf = np.array([np.log(n_docs / (doc_freq[t] + 1)) + 1 for t in terms], dtype=float)

    matrix = np.zeros((n_docs, len(terms)), dtype=float)
    for i, tf in enumerate(documents):
        for term, value in tf.items():
            matrix[i, column[term]] = value
    matrix *= idf

    logger.debug(f"TF-IDF: {n_docs} docs × {len(terms)} terms")
    return TfidfMatrix(terms, matrix)
