"""
Shared utilities used across all pipeline stages.

- hashing.py: stable content ids
- urls.py: URL normalization and domain extraction
- text.py: tokenizers and Jaccard similarity
- stopwords.py: English/Hebrew stopword sets, Hebrew normalization
"""

from pulse.shared.hashing import generate_id
from pulse.shared.urls import normalize_url, extract_domain, urls_match
from pulse.shared.text import word_set, extract_terms, jaccard
from pulse.shared.stopwords import normalize_hebrew, is_stopword
