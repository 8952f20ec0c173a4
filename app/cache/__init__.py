"""
Cache-aside storage with per-slot TTL and swappable backends.
"""
from .core import CacheEntry, CacheResult, CacheStatus, is_valid_slot
from .ttl_policies import (
    KEY_PREFIXES,
    ContentKind,
    get_ttl_for_kind,
    make_cache_key,
)
from .backends import (
    CacheBackend,
    FileCacheBackend,
    MemoryCacheBackend,
    create_backend,
    get_cache_backend,
    set_cache_backend,
)
from .manager import Cache, get_cache

__all__ = [
    # Core types
    "CacheEntry",
    "CacheResult",
    "CacheStatus",
    "is_valid_slot",
    # Content kinds
    "KEY_PREFIXES",
    "ContentKind",
    "get_ttl_for_kind",
    "make_cache_key",
    # Stores
    "CacheBackend",
    "FileCacheBackend",
    "MemoryCacheBackend",
    "create_backend",
    "get_cache_backend",
    "set_cache_backend",
    # Handle
    "Cache",
    "get_cache",
]
