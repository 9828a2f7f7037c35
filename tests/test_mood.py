"""
Tests for emotion scoring, aggregation, the Tension Index and region moods.
"""

from datetime import timedelta

import pytest

from pulse.config import EmotionWeights, NegativeWeights, PulseConfig
from pulse.mood import (
    EMOTION_LABELS,
    aggregate_emotions,
    aggregate_mood_by_region,
    calculate_emotion_deltas,
    calculate_item_mood_score,
    calculate_tension_index,
    format_emotion,
    get_dominant_emotion,
    normalize_distribution,
    recency_weight,
    score_item_emotions,
)
from pulse.mood.weighting import item_weight
from pulse.schemas import EMOTIONS, Emotion, EmotionDistribution

NEUTRAL_TITLE = "Municipal office hours change on Tuesday"
ANGRY_TITLE = "Furious protest turns into riot"


class TestScoreItemEmotions:

    def test_no_keywords_is_neutral(self, make_item):
        dist = score_item_emotions(make_item(NEUTRAL_TITLE))
        assert dist.neutral == 1.0
        assert dist.total() == pytest.approx(1.0)

    def test_anger_only(self, make_item):
        dist = score_item_emotions(make_item(ANGRY_TITLE))
        assert dist.anger == pytest.approx(1.0)
        assert dist.neutral == 0.0

    def test_mixed_counts_are_normalized(self, make_item):
        # anger: outrage, rage, protest / hope: hope
        dist = score_item_emotions(make_item("Outrage at protest", text="residents still hope"))
        assert dist.anger == pytest.approx(3 / 4)
        assert dist.hope == pytest.approx(1 / 4)

    def test_text_field_is_scored(self, make_item):
        dist = score_item_emotions(make_item("Update", text="A tragic funeral"))
        assert dist.sadness == pytest.approx(1.0)

    def test_custom_lexicon(self, make_item):
        lexicon = {Emotion.HOPE: ["sunny"]}
        dist = score_item_emotions(make_item("Sunny weekend ahead"), lexicon)
        assert dist.hope == 1.0


class TestNormalizeDistribution:

    def test_zero_becomes_neutral(self):
        assert normalize_distribution(EmotionDistribution()).neutral == 1.0

    def test_sums_to_one(self):
        dist = normalize_distribution(EmotionDistribution(anger=2, hope=6))
        assert dist.anger == pytest.approx(0.25)
        assert dist.hope == pytest.approx(0.75)


class TestAggregateEmotions:

    def test_empty_is_neutral(self):
        assert aggregate_emotions([]).neutral == 1.0

    def test_sums_to_one(self, make_item, now):
        items = [
            make_item(ANGRY_TITLE, engagement=120, hours_ago=1),
            make_item("Hope for peace deal", engagement=3, hours_ago=5),
            make_item(NEUTRAL_TITLE, engagement=5000, hours_ago=20),
        ]
        dist = aggregate_emotions(items, now=now)
        assert dist.total() == pytest.approx(1.0, abs=1e-5)

    def test_equal_weights_average(self, make_item, now):
        items = [make_item(ANGRY_TITLE), make_item(NEUTRAL_TITLE)]
        dist = aggregate_emotions(items, now=now)
        assert dist.anger == pytest.approx(0.5)
        assert dist.neutral == pytest.approx(0.5)

    def test_skips_duplicates(self, make_item, now):
        items = [make_item(NEUTRAL_TITLE), make_item(ANGRY_TITLE, duplicate_of="x")]
        assert aggregate_emotions(items, now=now).neutral == pytest.approx(1.0)

    def test_zero_total_weight_is_neutral(self, make_item, now):
        items = [make_item(ANGRY_TITLE, relevance_score=0.0)]
        assert aggregate_emotions(items, now=now).neutral == 1.0

    def test_fresh_items_dominate(self, make_item, now):
        items = [make_item(ANGRY_TITLE, hours_ago=0), make_item("Hope for peace", hours_ago=48)]
        dist = aggregate_emotions(items, now=now)
        assert dist.anger > 0.9


class TestWeighting:

    def test_recency_half_life(self, now):
        assert recency_weight(now, now=now) == pytest.approx(1.0)
        assert recency_weight(now - timedelta(hours=6), now=now) == pytest.approx(0.5, abs=1e-3)
        assert recency_weight(now - timedelta(hours=12), now=now) == pytest.approx(0.25, abs=1e-3)

    def test_engagement_is_capped(self, make_item, now):
        capped = item_weight(make_item("a", engagement=1000), now=now)
        huge = item_weight(make_item("b", engagement=10 ** 6), now=now)
        assert capped == huge

    def test_default_relevance(self, make_item, now):
        unscored = item_weight(make_item("a"), now=now)
        scored = item_weight(make_item("b", relevance_score=1.0), now=now)
        assert scored == pytest.approx(unscored * 2)


class TestTensionIndex:

    def test_all_neutral_is_zero(self):
        assert calculate_tension_index(EmotionDistribution.neutral_only()) == 0

    def test_pure_anger(self):
        tension = calculate_tension_index(EmotionDistribution(anger=1.0))
        assert 50 < tension <= 100

    def test_positive_emotions_reduce_tension(self):
        tense = calculate_tension_index(EmotionDistribution(anxiety=0.5, neutral=0.5))
        calmer = calculate_tension_index(EmotionDistribution(anxiety=0.5, hope=0.5))
        assert calmer < tense
        # 0.5 - 0.5 * 0.7 * 0.5
        assert calmer == 33

    def test_never_negative(self):
        assert calculate_tension_index(EmotionDistribution(hope=1.0)) == 0

    def test_rounds_half_up(self):
        assert calculate_tension_index(EmotionDistribution(anger=0.125, neutral=0.875)) == 13

    def test_capped_at_100(self):
        weights = EmotionWeights(negative=NegativeWeights(anger=2.0))
        assert calculate_tension_index(EmotionDistribution(anger=1.0), weights) == 100

    def test_custom_weights(self):
        weights = EmotionWeights(negative=NegativeWeights(anger=0.5))
        assert calculate_tension_index(EmotionDistribution(anger=1.0), weights) == 50


class TestMoodHelpers:

    def test_item_mood_score(self, make_item):
        assert calculate_item_mood_score(make_item(ANGRY_TITLE)) == 0
        assert calculate_item_mood_score(make_item(NEUTRAL_TITLE)) == 100

    def test_dominant_emotion_tie_goes_to_earlier(self):
        assert get_dominant_emotion(EmotionDistribution(anger=0.5, hope=0.5)) == Emotion.ANGER

    def test_dominant_emotion_all_zero(self):
        assert get_dominant_emotion(EmotionDistribution()) == Emotion.NEUTRAL

    def test_labels(self):
        assert format_emotion(Emotion.ANXIETY) == "Anxiety / Tension"
        assert format_emotion("neutral") == "Neutral / Informational"
        assert EMOTION_LABELS[Emotion.HOPE] == "Hope"

    def test_emotion_deltas(self):
        current = EmotionDistribution(anger=0.6, neutral=0.4)
        previous = EmotionDistribution(anger=0.2, neutral=0.8)
        deltas = calculate_emotion_deltas(current, previous)
        assert [d.emotion for d in deltas] == EMOTIONS
        by_emotion = {d.emotion: d for d in deltas}
        assert by_emotion[Emotion.ANGER].delta == pytest.approx(0.4)
        assert by_emotion[Emotion.NEUTRAL].delta == pytest.approx(-0.4)

    def test_emotion_deltas_without_previous(self):
        deltas = calculate_emotion_deltas(EmotionDistribution(anger=1.0), None)
        assert all(d.delta == 0 for d in deltas)


class TestRegionMoods:

    def test_groups_by_country(self, make_item, tel_aviv, jerusalem, amman, now):
        items = [
            make_item(ANGRY_TITLE, location=tel_aviv),
            make_item(NEUTRAL_TITLE, location=jerusalem),
            make_item("Hope for peace", location=amman),
            make_item("No location here"),
            make_item(ANGRY_TITLE, location=jerusalem, duplicate_of="x"),
        ]
        moods = aggregate_mood_by_region(items, PulseConfig(), now=now)

        assert [m.country for m in moods] == ["Israel", "Jordan"]
        israel = moods[0]
        assert israel.item_count == 2
        assert israel.item_ids == [items[0].id, items[1].id]
        assert israel.emotions.total() == pytest.approx(1.0)
        assert moods[1].tension_index == 0

    def test_empty(self):
        assert aggregate_mood_by_region([]) == []
