"""
Content kinds, their cache key prefixes and TTLs.
"""
from enum import Enum
from typing import Any, Dict

from config.settings import settings


class ContentKind(Enum):
    """Kinds of design content served through the cache."""
    AD = "ad"                       # Random banner for a slot size
    ANALYTICS = "analytics"         # Analytics API snippet
    CUSTOM_CODE = "custom_code"     # Admin-authored CSS/JS
    STATIC_FILES = "static_files"   # Extra CSS/JS files to include


# Cache key prefix by kind
KEY_PREFIXES: Dict[ContentKind, str] = {
    ContentKind.AD: "ads",
    ContentKind.ANALYTICS: "analyticsApi",
    ContentKind.CUSTOM_CODE: "customCode",
    ContentKind.STATIC_FILES: "files",
}

# Per-kind TTL overrides (seconds); kinds not listed use settings.cache_ttl_seconds
TTL_OVERRIDES: Dict[ContentKind, int] = {}


def get_ttl_for_kind(kind: ContentKind) -> int:
    """TTL in seconds for a content kind."""
    return TTL_OVERRIDES.get(kind, settings.cache_ttl_seconds)


def _key_part(value: Any) -> str:
    # Booleans first: bool is a subclass of int
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def make_cache_key(kind: ContentKind, *parts: Any) -> str:
    """
    Build the cache key for a content lookup.

    The kind's prefix is joined with the distinguishing parameters using "_",
    so (160, 100) and (1601, 00) can never collide.

    Example:
        make_cache_key(ContentKind.AD, 160, 100, False) -> "ads_160_100_0"
    """
    return "_".join([KEY_PREFIXES[kind]] + [_key_part(p) for p in parts])
