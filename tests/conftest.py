"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from pulse.config import PulseConfig
from pulse.schemas import ContentItem, Location

# Fixed reference clock so recency weights are reproducible
NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def config():
    return PulseConfig()


@pytest.fixture
def make_item():
    """Factory for ContentItem with sensible defaults.

    Each call gets a unique URL unless one is given, so items never collapse
    by URL by accident.
    """
    counter = {"n": 0}

    def _make(title, text=None, engagement=0, hours_ago=0.0, url=None, **kwargs):
        counter["n"] += 1
        return ContentItem(
            title=title,
            text=text,
            engagement=engagement,
            created_at=NOW - timedelta(hours=hours_ago),
            url=url if url is not None else f"https://news{counter['n']}.example.org/story/{counter['n']}",
            **kwargs,
        )

    return _make


@pytest.fixture
def tel_aviv():
    return Location(name="Tel Aviv", lat=32.0853, lng=34.7818, country="Israel")


@pytest.fixture
def jerusalem():
    return Location(name="Jerusalem", lat=31.7683, lng=35.2137, country="Israel")


@pytest.fixture
def amman():
    return Location(name="Amman", lat=31.9539, lng=35.9106, country="Jordan")
