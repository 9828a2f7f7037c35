"""
URL normalization and domain extraction.
Used by dedup (exact URL match, same-domain boost) and receipt favicons.
"""

import logging
import re
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


def _parse(url: str):
    """Split an absolute URL; None when it has no scheme/host or cannot be parsed."""
    try:
        parsed = urlsplit(url.strip())
        hostname = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not hostname:
        return None
    return parsed


def normalize_url(url: str) -> str:
    """
    Canonical form for URL comparison.

    Drops protocol, leading `www.`, a single trailing slash, query string and
    fragment, then lowercases.

    Examples:
        "https://www.example.com/a/?x=1#top" → "example.com/a"
        "http://example.com/a"               → "example.com/a"
        "example.com/a/"                     → "example.com/a" (fallback path)
    """
    if not url:
        return ""

    parsed = _parse(url)
    if parsed is None:
        # Not an absolute URL: basic textual normalization
        normalized = url.strip().lower()
        normalized = re.sub(r"^https?://", "", normalized)
        normalized = re.sub(r"^www\.", "", normalized)
        return re.sub(r"/$", "", normalized)

    hostname = re.sub(r"^www\.", "", parsed.hostname)
    path = re.sub(r"/$", "", parsed.path)
    return f"{hostname}{path}".lower()


def extract_domain(url: str) -> str:
    """Hostname without `www.`; empty string when the URL cannot be parsed."""
    if not url:
        return ""
    parsed = _parse(url)
    if parsed is None:
        return ""
    return re.sub(r"^www\.", "", parsed.hostname)


def urls_match(url_a: str, url_b: str) -> bool:
    return bool(url_a) and bool(url_b) and normalize_url(url_a) == normalize_url(url_b)
