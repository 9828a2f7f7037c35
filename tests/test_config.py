"""
Tests for PulseConfig validation and environment settings.
"""

import pytest
from pydantic import ValidationError

from pulse.config import (
    EMOTION_KEYWORDS,
    EmotionWeights,
    PulseConfig,
    Settings,
    get_settings,
)
from pulse.errors import PulseConfigError, check_positive, check_unit_interval
from pulse.schemas import Emotion


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("PULSE_MAX_TOPICS", "PULSE_RELEVANCE_KEYWORDS", "PULSE_SOURCE_TRUST",
                 "PULSE_EMOTION_WEIGHTS", "PULSE_SIMILARITY_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestPulseConfig:

    def test_defaults(self):
        config = PulseConfig()
        assert config.similarity_threshold == 0.25
        assert config.max_topics == 12
        assert config.min_cluster_size == 2
        assert config.keywords_per_topic == 5
        assert config.receipts_per_topic == 5
        assert config.source_trust == {"search": 0.8}
        assert config.emotion_lexicon[Emotion.ANGER] == EMOTION_KEYWORDS[Emotion.ANGER]

    @pytest.mark.parametrize("field, value", [
        ("similarity_threshold", 1.5),
        ("dedup_threshold", -0.1),
        ("min_cluster_size", 0),
        ("max_topics", 0),
        ("recency_half_life_hours", 0),
    ])
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            PulseConfig(**{field: value})

    def test_rejects_bad_trust(self):
        with pytest.raises(ValidationError):
            PulseConfig(source_trust={"rss": 2.0})

    def test_keywords_lowercased(self):
        assert PulseConfig(relevance_keywords=["Tel Aviv", " ", ""]).relevance_keywords == ["tel aviv"]

    def test_with_overrides(self):
        config = PulseConfig()
        assert config.with_overrides(max_topics=None) is config
        assert config.with_overrides(max_topics=3).max_topics == 3

    def test_with_overrides_validates(self):
        with pytest.raises(PulseConfigError):
            PulseConfig().with_overrides(similarity_threshold=2.0)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            PulseConfig().max_topics = 1


class TestSettings:

    def test_env_overrides(self, clean_env):
        clean_env.setenv("PULSE_MAX_TOPICS", "4")
        clean_env.setenv("PULSE_RELEVANCE_KEYWORDS", "Tel Aviv, Haifa ,")
        clean_env.setenv("PULSE_SOURCE_TRUST", '{"rss": 0.6}')

        settings = get_settings()
        assert settings.max_topics == 4
        assert settings.parsed_keywords() == ["Tel Aviv", "Haifa"]

        config = settings.to_pulse_config()
        assert config.max_topics == 4
        assert config.relevance_keywords == ["tel aviv", "haifa"]
        assert config.source_trust == {"rss": 0.6}

    def test_provider_keywords_win(self, clean_env):
        clean_env.setenv("PULSE_RELEVANCE_KEYWORDS", "haifa")
        config = Settings().to_pulse_config(relevance_keywords=["eilat"])
        assert config.relevance_keywords == ["eilat"]

    def test_emotion_weights_json(self, clean_env):
        clean_env.setenv("PULSE_EMOTION_WEIGHTS", '{"negative": {"anger": 0.5}}')
        weights = Settings().parsed_emotion_weights()
        assert isinstance(weights, EmotionWeights)
        assert weights.negative.anger == 0.5
        assert weights.negative.anxiety == 1.0

    def test_invalid_env_raises_config_error(self, clean_env):
        clean_env.setenv("PULSE_SIMILARITY_THRESHOLD", "3")
        with pytest.raises(PulseConfigError):
            Settings().to_pulse_config()

    def test_malformed_json_raises_config_error(self, clean_env):
        clean_env.setenv("PULSE_SOURCE_TRUST", "{not json")
        with pytest.raises(PulseConfigError):
            Settings().to_pulse_config()

    def test_cached(self, clean_env):
        assert get_settings() is get_settings()


class TestChecks:

    def test_unit_interval(self):
        assert check_unit_interval("x", 0.0) == 0.0
        with pytest.raises(PulseConfigError, match="x must be within"):
            check_unit_interval("x", 1.01)

    def test_positive(self):
        with pytest.raises(ValueError):
            check_positive("cap", 0)
