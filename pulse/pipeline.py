"""
Pulse pipeline: items → PulseResult.

Phases:
  1. relevance:  score every item against the run's keywords (in place)
  2. dedup:      drop near-duplicates, keep highest engagement
  3. mood:       per-item mood score (caller-provided score wins)
  4. cluster:    TF-IDF greedy clustering → topics (+ receipt locations)
  5. aggregate:  overall emotion mix, Tension Index, per-country moods
  6. deltas:     tension/emotion/topic change vs. the prior-day snapshot
  7. enrich:     optional external titles/explanations (fallback: keywords)
  8. receipts:   map/feed receipts from topics + unclustered items

The pipeline is pure: it never loads or saves anything. Callers hand in the
prior-day snapshot and persist `snapshot_for(result, date)` themselves, or
use run_day() with a SnapshotStore.
"""

import logging
import time
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pulse.config import PulseConfig
from pulse.interfaces import SnapshotStore, TopicEnricher
from pulse.mood.emotions import aggregate_with_config, calculate_emotion_deltas
from pulse.mood.regions import aggregate_mood_by_region
from pulse.mood.tension import calculate_item_mood_score, calculate_tension_index
from pulse.news.dedup import ItemDeduplicator
from pulse.news.relevance import RelevanceScorer
from pulse.schemas import ContentItem, PulseResult, Receipt, Snapshot, Topic
from pulse.trends.clustering import (
    add_locations_to_topics,
    cluster_into_topics,
    find_unclustered_items,
    items_to_receipts,
)
from pulse.trends.memory import (
    apply_topic_deltas,
    build_snapshot,
    calculate_tension_delta,
    get_date_string,
)

logger = logging.getLogger(__name__)

TOPIC_RECEIPTS_IN_FEED = 10
UNCLUSTERED_IN_FEED = 20


class PulsePipeline:
    """One configured pulse run over an in-memory batch of items.

    Usage:
        pipeline = PulsePipeline(settings.to_pulse_config(provider.get_keywords()))
        result = pipeline.run(items, snapshot=store.load_prior_day(today))
        store.save(pipeline.snapshot_for(result, today))
    """

    def __init__(
        self,
        config: Optional[PulseConfig] = None,
        scorer: Optional[RelevanceScorer] = None,
    ):
        self.config = config or PulseConfig()
        self.scorer = scorer or RelevanceScorer.from_config(self.config)
        self.deduplicator = ItemDeduplicator(threshold=self.config.dedup_threshold)
        self.metrics: Dict[str, Any] = {"phase_times": {}, "item_counts": {}}

    def _timed(self, phase: str, started: float) -> None:
        self.metrics["phase_times"][phase] = round(time.time() - started, 3)

    # ══════════════════════════════════════════════════════════════════════
    # RUN
    # ══════════════════════════════════════════════════════════════════════

    def run(
        self,
        items: List[ContentItem],
        snapshot: Optional[Snapshot] = None,
        enricher: Optional[TopicEnricher] = None,
        now: Optional[datetime] = None,
    ) -> PulseResult:
        """Derive the full pulse for a batch of items.

        Args:
            items: Collected items. relevance_score is set on them in place.
            snapshot: Prior-day snapshot for deltas (None = no deltas).
            enricher: Optional external titler (e.g. an LLM client).
            now: Reference time for recency weighting (defaults to wall clock).
        """
        now = now or datetime.now(timezone.utc)
        total_start = time.time()
        self.metrics = {"phase_times": {}, "item_counts": {"input": len(items)}}
        cfg = self.config

        t = time.time()
        self.scorer.score_items(items)
        self._timed("relevance", t)

        t = time.time()
        unique = self.deduplicator.deduplicate(items)
        self.metrics["item_counts"]["unique"] = len(unique)
        self._timed("dedup", t)

        t = time.time()
        unique = self._phase_mood(unique)
        self._timed("mood", t)

        t = time.time()
        topics = cluster_into_topics(unique, cfg, now=now)
        topics = add_locations_to_topics(topics)
        self.metrics["item_counts"]["clustered"] = sum(topic.size for topic in topics)
        self._timed("cluster", t)

        t = time.time()
        emotions = aggregate_with_config(unique, cfg, now)
        tension = calculate_tension_index(emotions, cfg.emotion_weights)
        region_moods = aggregate_mood_by_region(unique, cfg, now)
        self._timed("aggregate", t)

        t = time.time()
        tension_delta = calculate_tension_delta(tension, snapshot)
        emotions_with_deltas = calculate_emotion_deltas(
            emotions, snapshot.emotions if snapshot is not None else None,
        )
        topics = apply_topic_deltas(topics, snapshot)
        self._timed("deltas", t)

        llm_outputs: Dict[str, str] = {}
        if enricher is not None:
            t = time.time()
            topics, llm_outputs = self._phase_enrich(topics, enricher)
            self._timed("enrich", t)

        t = time.time()
        receipts_feed = self._phase_receipts_feed(unique, topics)
        all_receipts = items_to_receipts(unique, use_context=True)
        self._timed("receipts", t)

        summary = (
            f"Tracking {len(topics)} topics with tension at {tension}/100."
            if topics
            else "No significant activity detected in the selected time window."
        )

        self.metrics["total_seconds"] = round(time.time() - total_start, 3)
        logger.info(
            f"Pulse: {len(items)} items → {len(unique)} unique → {len(topics)} topics "
            f"→ tension {tension} ({tension_delta:+d}) in {self.metrics['total_seconds']}s"
        )

        return PulseResult(
            tension_index=tension,
            tension_delta=tension_delta,
            emotion_distribution=emotions,
            emotions=emotions_with_deltas,
            overall_summary=summary,
            topics=topics,
            receipts_feed=receipts_feed,
            all_receipts=all_receipts,
            region_moods=region_moods,
            llm_outputs=llm_outputs,
            input_count=len(items),
            unique_count=len(unique),
            computed_at=now,
        )

    def run_day(
        self,
        items: List[ContentItem],
        store: SnapshotStore,
        today: Optional[date] = None,
        enricher: Optional[TopicEnricher] = None,
        now: Optional[datetime] = None,
    ) -> PulseResult:
        """run() with the prior-day snapshot loaded from, and today's saved to, a store."""
        now = now or datetime.now(timezone.utc)
        day = get_date_string(today or now)
        result = self.run(items, snapshot=store.load_prior_day(day), enricher=enricher, now=now)
        store.save(self.snapshot_for(result, day))
        return result

    @staticmethod
    def snapshot_for(
        result: PulseResult,
        date_string: str,
        llm_outputs: Optional[Dict[str, str]] = None,
    ) -> Snapshot:
        """Today's snapshot for the store (top 10 topics, keywords + member ids)."""
        return build_snapshot(
            date_string,
            result.tension_index,
            result.emotion_distribution,
            result.topics,
            llm_outputs if llm_outputs is not None else result.llm_outputs,
        )

    # ══════════════════════════════════════════════════════════════════════
    # PHASES
    # ══════════════════════════════════════════════════════════════════════

    def _phase_mood(self, items: List[ContentItem]) -> List[ContentItem]:
        """Copies of items with mood_score filled (0 tense … 100 calm)."""
        cfg = self.config
        scored = [
            i if i.mood_score is not None else i.model_copy(update={
                "mood_score": calculate_item_mood_score(i, cfg.emotion_lexicon, cfg.emotion_weights),
            })
            for i in items
        ]
        if scored:
            avg = sum(i.mood_score for i in scored) / len(scored)
            located = sum(1 for i in scored if i.location is not None)
            logger.info(f"Mood: avg {avg:.0f}/100, {located}/{len(scored)} items located")
        return scored

    def _phase_enrich(self, topics: List[Topic], enricher: TopicEnricher):
        """Apply external titles. A failing enricher keeps the keyword title."""
        enriched: List[Topic] = []
        outputs: Dict[str, str] = {}
        failures = 0

        for topic in topics:
            try:
                result = enricher.enrich(topic)
            except Exception as e:
                failures += 1
                logger.warning(f"Enrichment failed for topic {topic.id} ({topic.title}): {e}")
                enriched.append(topic)
                continue

            if result is None:
                enriched.append(topic)
                continue

            update = {}
            if result.title:
                update["title"] = result.title
                outputs[f"{topic.id}:title"] = result.title
            if result.why_trending:
                update["why_trending"] = result.why_trending
                outputs[f"{topic.id}:why_trending"] = result.why_trending
            enriched.append(topic.model_copy(update=update) if update else topic)

        self.metrics["enrichment"] = {"topics": len(topics), "failures": failures}
        if failures:
            logger.warning(f"Enrichment: {failures}/{len(topics)} topics kept keyword titles")
        return enriched, outputs

    def _phase_receipts_feed(self, items: List[ContentItem], topics: List[Topic]) -> List[Receipt]:
        """First receipts of the top topics, then the most-engaged unclustered items."""
        feed: List[Receipt] = []
        for topic in topics:
            for receipt in topic.receipts:
                if len(feed) >= TOPIC_RECEIPTS_IN_FEED:
                    break
                feed.append(receipt)
            if len(feed) >= TOPIC_RECEIPTS_IN_FEED:
                break

        unclustered = find_unclustered_items(items, topics, UNCLUSTERED_IN_FEED)
        feed.extend(items_to_receipts(unclustered, use_context=True))
        return feed[:self.config.receipts_feed_size]
