"""Per-country mood aggregation for map colouring and regional summaries."""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from pulse.config import PulseConfig
from pulse.schemas import ContentItem, RegionMood
from pulse.mood.emotions import aggregate_with_config
from pulse.mood.tension import calculate_tension_index

logger = logging.getLogger(__name__)


def aggregate_mood_by_region(
    items: List[ContentItem],
    config: Optional[PulseConfig] = None,
    now: Optional[datetime] = None,
) -> List[RegionMood]:
    """
    Group non-duplicate items by location.country and score each group.

    Items without a country are ignored. Result is sorted by item count,
    largest first (ties keep first-seen order).
    """
    config = config or PulseConfig()
    by_country: Dict[str, List[ContentItem]] = defaultdict(list)
    without_country = 0

    for item in items:
        if item.duplicate_of:
            continue
        country = item.location.country if item.location else None
        if not country:
            without_country += 1
            continue
        by_country[country].append(item)

    moods = []
    for country, country_items in by_country.items():
        emotions = aggregate_with_config(country_items, config, now)
        moods.append(RegionMood(
            country=country,
            tension_index=calculate_tension_index(emotions, config.emotion_weights),
            item_count=len(country_items),
            emotions=emotions,
            item_ids=[i.id for i in country_items],
        ))

    moods.sort(key=lambda m: m.item_count, reverse=True)

    logger.info(
        f"Region moods: {len(moods)} countries "
        f"({sum(m.item_count for m in moods)} items located, {without_country} without country)"
    )
    return moods
