"""
Stage 5-6: TF-IDF topic clustering and the day-over-day delta engine.

Modules:
- vectorizer: max-normalized TF × smoothed IDF document vectors (numpy)
- keywords: cluster keywords and keyword titles
- clustering: greedy cosine clustering into Topics
- memory: snapshots, tension/topic/emotion deltas
"""

from pulse.trends.vectorizer import TfidfMatrix, build_tfidf
from pulse.trends.keywords import top_keywords, keyword_title
from pulse.trends.clustering import (
    cluster_into_topics,
    find_unclustered_items,
    add_locations_to_topics,
    items_to_receipts,
)
from pulse.trends.memory import (
    InMemorySnapshotStore,
    apply_topic_deltas,
    build_snapshot,
    calculate_emotion_deltas,
    calculate_tension_delta,
    calculate_topic_delta,
    get_date_string,
    get_emotion_deltas,
    get_yesterday_date_string,
    parse_snapshot_payload,
)
