"""Stable content hashing for item and topic ids."""

import hashlib


def generate_id(content: str) -> str:
    """Return a 16-hex-char sha256 prefix of ``content``."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]
