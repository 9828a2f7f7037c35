"""
Cluster keyword extraction and keyword-based titles.

Keywords are the terms with the highest summed tf-idf over a cluster's
members. Ties go to the alphabetically earlier term (the vocabulary axis is
sorted). Terms absent from every member are never returned.
"""

from typing import List, Sequence

import numpy as np

from pulse.trends.vectorizer import TfidfMatrix


def top_keywords(vectors: TfidfMatrix, members: Sequence[int], n: int = 5) -> List[str]:
    if not members or vectors.n_terms == 0:
        return []
    scores = vectors.matrix[list(members)].sum(axis=0)
    # stable argsort on the negated scores keeps vocabulary order for ties
    order = np.argsort(-scores, kind="stable")
    return [vectors.terms[j] for j in order[:n] if scores[j] > 0]


def keyword_title(keywords: Sequence[str]) -> str:
    """["tel", "aviv", "rocket"] → "Tel / Aviv / Rocket"."""
    return " / ".join(k[:1].upper() + k[1:] for k in list(keywords)[:3])
