"""
Swappable cache stores.

Every backend keeps (group, key) -> CacheEntry with TTL-based expiry.
Writes overwrite unconditionally: concurrent misses on the same slot both
write, and the last writer wins.
"""
import json
import logging
import os
import shutil
import tempfile
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from config.settings import settings

from .core import CacheEntry, CacheResult, slot_id

logger = logging.getLogger("cache.backends")

Clock = Callable[[], float]


class CacheBackend(ABC):
    """
    Common store interface with hit/miss accounting.
    """

    name = "abstract"

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or time.time
        self._stats_lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "writes": 0,
        }

    def now(self) -> float:
        return self._clock()

    def read(self, group: str, key: str) -> CacheResult:
        """Look up a slot, dropping it if its TTL has elapsed."""
        entry = self._load(group, key)
        if entry is None:
            self._count("misses")
            return CacheResult.miss()

        if entry.is_expired(self.now()):
            # A concurrent write may have replaced the entry since it was loaded
            self._discard(group, key, entry)
            self._count("expired")
            return CacheResult.expired()

        self._count("hits")
        return CacheResult.hit_with(entry.payload)

    def write(self, group: str, key: str, payload: Any, ttl_seconds: int) -> None:
        """Store payload, replacing whatever the slot held."""
        entry = CacheEntry(payload=payload, created_at=self.now(), ttl_seconds=ttl_seconds)
        self._save(group, key, entry)
        self._count("writes")

    def invalidate(self, group: str, key: str) -> bool:
        """
        Remove a single slot.

        Returns:
            True if the slot existed
        """
        removed = self._remove(group, key)
        if removed:
            logger.info(f"Invalidated cache: {slot_id(group, key)}")
        return removed

    def _count(self, name: str) -> None:
        with self._stats_lock:
            self._stats[name] += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._stats_lock:
            stats = dict(self._stats)
        lookups = stats["hits"] + stats["misses"] + stats["expired"]
        hit_rate = (stats["hits"] / lookups * 100) if lookups > 0 else 0
        stats["entries"] = self.entry_count()
        stats["hit_rate_percent"] = round(hit_rate, 1)
        stats["backend"] = self.name
        return stats

    @abstractmethod
    def _load(self, group: str, key: str) -> Optional[CacheEntry]:
        ...

    @abstractmethod
    def _save(self, group: str, key: str, entry: CacheEntry) -> None:
        ...

    @abstractmethod
    def _remove(self, group: str, key: str) -> bool:
        ...

    @abstractmethod
    def _discard(self, group: str, key: str, entry: CacheEntry) -> bool:
        """Remove the slot only if it still holds this entry."""

    @abstractmethod
    def invalidate_group(self, group: str) -> int:
        """Remove every slot in a group. Returns the number removed."""

    @abstractmethod
    def clear(self) -> int:
        """Remove every slot. Returns the number removed."""

    @abstractmethod
    def entry_count(self) -> int:
        ...


class MemoryCacheBackend(CacheBackend):
    """
    Process-local dict store, safe to share across the request thread pool.
    """

    name = "memory"

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock)
        self._cache: Dict[str, CacheEntry] = {}
        self._cache_lock = threading.RLock()

    def _load(self, group: str, key: str) -> Optional[CacheEntry]:
        with self._cache_lock:
            return self._cache.get(slot_id(group, key))

    def _save(self, group: str, key: str, entry: CacheEntry) -> None:
        with self._cache_lock:
            self._cache[slot_id(group, key)] = entry

    def _remove(self, group: str, key: str) -> bool:
        with self._cache_lock:
            return self._cache.pop(slot_id(group, key), None) is not None

    def _discard(self, group: str, key: str, entry: CacheEntry) -> bool:
        sid = slot_id(group, key)
        with self._cache_lock:
            if self._cache.get(sid) is not entry:
                return False
            del self._cache[sid]
            return True

    def invalidate_group(self, group: str) -> int:
        prefix = f"{group}/"
        with self._cache_lock:
            to_delete = [k for k in self._cache if k.startswith(prefix)]
            for k in to_delete:
                del self._cache[k]
        if to_delete:
            logger.info(f"Invalidated {len(to_delete)} entries in group '{group}'")
        return len(to_delete)

    def clear(self) -> int:
        with self._cache_lock:
            count = len(self._cache)
            self._cache.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def entry_count(self) -> int:
        with self._cache_lock:
            return len(self._cache)


class FileCacheBackend(CacheBackend):
    """
    One JSON file per slot: <directory>/<group>/<key>.json

    Payloads must be JSON-serializable. Files are written to a temp file
    and moved into place, so readers never see a partial entry.
    """

    name = "file"

    def __init__(self, directory: Path, clock: Optional[Clock] = None):
        super().__init__(clock)
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, group: str, key: str) -> Path:
        return self.directory.joinpath(*group.split("/"), f"{key}.json")

    def _load(self, group: str, key: str) -> Optional[CacheEntry]:
        path = self._path(group, key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return CacheEntry.from_dict(json.load(f))
        except FileNotFoundError:
            return None
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding corrupt cache file {path}: {e}")
            path.unlink(missing_ok=True)
            return None

    def _save(self, group: str, key: str, entry: CacheEntry) -> None:
        path = self._path(group, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entry.to_dict(), f)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _remove(self, group: str, key: str) -> bool:
        path = self._path(group, key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False

    def _discard(self, group: str, key: str, entry: CacheEntry) -> bool:
        if self._load(group, key) != entry:
            return False
        return self._remove(group, key)

    def invalidate_group(self, group: str) -> int:
        group_dir = self.directory.joinpath(*group.split("/"))
        if not group_dir.is_dir():
            return 0
        count = sum(1 for _ in group_dir.rglob("*.json"))
        shutil.rmtree(group_dir, ignore_errors=True)
        if count:
            logger.info(f"Invalidated {count} entries in group '{group}'")
        return count

    def clear(self) -> int:
        count = self.entry_count()
        for child in self.directory.iterdir():
            if child.is_dir():
                shutil.rmtree(child, ignore_errors=True)
            else:
                child.unlink(missing_ok=True)
        logger.info(f"Cleared {count} cache entries")
        return count

    def entry_count(self) -> int:
        return sum(1 for _ in self.directory.rglob("*.json"))


def create_backend(clock: Optional[Clock] = None) -> CacheBackend:
    """Build the backend selected in settings."""
    if settings.cache_backend == "file":
        return FileCacheBackend(settings.cache_directory, clock=clock)
    if settings.cache_backend != "memory":
        raise ValueError(f"Unknown cache backend: {settings.cache_backend!r}")
    return MemoryCacheBackend(clock=clock)


# Global cache store, shared by every request in the process
_cache_backend: Optional[CacheBackend] = None
_cache_backend_lock = threading.Lock()


def get_cache_backend() -> CacheBackend:
    """Get or create the global cache store."""
    global _cache_backend
    with _cache_backend_lock:
        if _cache_backend is None:
            _cache_backend = create_backend()
            logger.info(f"Cache backend initialized: {_cache_backend.name}")
        return _cache_backend


def set_cache_backend(backend: Optional[CacheBackend]) -> None:
    """Replace the global store (None resets it to lazy creation)."""
    global _cache_backend
    with _cache_backend_lock:
        _cache_backend = backend
