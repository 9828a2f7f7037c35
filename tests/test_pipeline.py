"""
End-to-end tests for PulsePipeline.
"""

import logging

import pytest

from pulse.config import PulseConfig
from pulse.interfaces import KeywordTitleEnricher
from pulse.pipeline import PulsePipeline
from pulse.schemas import EmotionDistribution, Snapshot, SnapshotTopic, TopicEnrichment
from pulse.trends import InMemorySnapshotStore, keyword_title


@pytest.fixture
def items(make_item, tel_aviv, jerusalem):
    first = make_item("Rocket attack on Tel Aviv", engagement=5, location=tel_aviv)
    return [
        first,
        make_item("Rockets fired at Tel Aviv", engagement=3),
        make_item("Tel Aviv under rocket fire", engagement=8, location=tel_aviv),
        make_item("Rocket attack on Tel Aviv", url=first.url, engagement=1),
        make_item("Heatwave expected across the coast", engagement=2, location=jerusalem,
                  context="Weather desk"),
        make_item("Startup raises funding for chip design", mood_score=42),
    ]


@pytest.fixture
def pipeline():
    return PulsePipeline(PulseConfig(relevance_keywords=["Tel Aviv"]))


class TitleEnricher:
    def enrich(self, topic):
        return TopicEnrichment(title="Rockets over Tel Aviv", why_trending="Sirens across the center")


class BrokenEnricher:
    def enrich(self, topic):
        raise RuntimeError("LLM timeout")


class SilentEnricher:
    def enrich(self, topic):
        return None


class TestRun:

    def test_end_to_end(self, pipeline, items, now):
        result = pipeline.run(items, now=now)

        assert result.input_count == 6
        assert result.unique_count == 5
        assert len(result.topics) == 1
        topic = result.topics[0]
        assert {"tel", "aviv", "rocket"} <= set(topic.keywords)
        assert topic.title == keyword_title(topic.keywords)
        assert topic.locations is not None and topic.locations[0].name == "Tel Aviv"
        assert 0 <= result.tension_index <= 100
        assert result.tension_delta == 0
        assert result.emotion_distribution.total() == pytest.approx(1.0, abs=1e-5)
        assert len(result.emotions) == 8
        assert result.overall_summary == f"Tracking 1 topics with tension at {result.tension_index}/100."

    def test_relevance_set_in_place(self, pipeline, items, now):
        pipeline.run(items, now=now)
        assert all(i.relevance_score is not None for i in items)

    def test_receipts(self, pipeline, items, now):
        result = pipeline.run(items, now=now)

        assert len(result.all_receipts) == 5
        # highest-engagement member of the top topic leads the feed
        assert result.receipts_feed[0].id == items[2].id
        feed_ids = [r.id for r in result.receipts_feed]
        assert items[4].id in feed_ids
        assert items[5].id in feed_ids
        heatwave = next(r for r in result.receipts_feed if r.id == items[4].id)
        assert heatwave.source == "Weather desk"

    def test_mood_scores(self, pipeline, items, now):
        result = pipeline.run(items, now=now)
        by_id = {r.id: r for r in result.all_receipts}
        assert all(r.mood_score is not None for r in result.all_receipts)
        assert by_id[items[5].id].mood_score == 42

    def test_region_moods(self, pipeline, items, now):
        result = pipeline.run(items, now=now)
        assert [m.country for m in result.region_moods] == ["Israel"]
        assert result.region_moods[0].item_count == 3

    def test_empty_input(self, pipeline, now):
        result = pipeline.run([], now=now)
        assert result.topics == []
        assert result.tension_index == 0
        assert result.emotion_distribution.neutral == 1.0
        assert result.overall_summary == "No significant activity detected in the selected time window."

    def test_metrics(self, pipeline, items, now):
        pipeline.run(items, now=now)
        phases = pipeline.metrics["phase_times"]
        for phase in ("relevance", "dedup", "mood", "cluster", "aggregate", "deltas", "receipts"):
            assert phase in phases
        assert "enrich" not in phases
        assert pipeline.metrics["item_counts"]["unique"] == 5


class TestEnrichment:

    def test_enricher_titles(self, pipeline, items, now):
        result = pipeline.run(items, enricher=TitleEnricher(), now=now)
        topic = result.topics[0]
        assert topic.title == "Rockets over Tel Aviv"
        assert topic.why_trending == "Sirens across the center"
        assert result.llm_outputs[f"{topic.id}:title"] == "Rockets over Tel Aviv"
        assert "enrich" in pipeline.metrics["phase_times"]

    def test_failing_enricher_keeps_keyword_title(self, pipeline, items, now, caplog):
        with caplog.at_level(logging.WARNING, logger="pulse.pipeline"):
            result = pipeline.run(items, enricher=BrokenEnricher(), now=now)
        topic = result.topics[0]
        assert topic.title == keyword_title(topic.keywords)
        assert result.llm_outputs == {}
        assert pipeline.metrics["enrichment"]["failures"] == 1
        assert "LLM timeout" in caplog.text

    def test_enricher_returning_none(self, pipeline, items, now):
        result = pipeline.run(items, enricher=SilentEnricher(), now=now)
        assert result.topics[0].title == keyword_title(result.topics[0].keywords)

    def test_keyword_title_enricher(self, pipeline, items, now):
        result = pipeline.run(items, enricher=KeywordTitleEnricher(), now=now)
        topic = result.topics[0]
        assert result.llm_outputs[f"{topic.id}:title"] == keyword_title(topic.keywords)
        assert f"{topic.id}:why_trending" not in result.llm_outputs


class TestRunDay:

    def test_uses_and_saves_snapshots(self, pipeline, items, now):
        store = InMemorySnapshotStore()
        store.save(Snapshot(
            date="2024-03-09",
            tension_index=40,
            emotions=EmotionDistribution.neutral_only(),
            top_topics=[SnapshotTopic(keywords=["rocket", "tel", "aviv"], item_ids=["old"])],
        ))

        result = pipeline.run_day(items, store, now=now)

        assert result.tension_delta == result.tension_index - 40
        assert result.topics[0].delta == 0
        assert "2024-03-10" in store
        saved = store.load("2024-03-10")
        assert saved.tension_index == result.tension_index
        assert saved.top_topics[0].item_ids == result.topics[0].member_ids

    def test_without_prior_snapshot(self, pipeline, items, now):
        store = InMemorySnapshotStore()
        result = pipeline.run_day(items, store, now=now)
        assert result.tension_delta == 0
        assert all(d.delta == 0 for d in result.emotions)
        assert len(store) == 1

    def test_snapshot_for_keeps_llm_outputs(self, pipeline, items, now):
        result = pipeline.run(items, enricher=TitleEnricher(), now=now)
        snapshot = PulsePipeline.snapshot_for(result, "2024-03-10")
        assert snapshot.llm_outputs == result.llm_outputs
        assert snapshot.date == "2024-03-10"
