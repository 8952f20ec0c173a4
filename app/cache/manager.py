"""
Slot-based cache handle: start(group, key, ttl) -> get() -> put(payload).
"""
import logging
from typing import Any, Optional, Tuple

from config.settings import settings

from .backends import CacheBackend, get_cache_backend
from .core import CacheResult, is_valid_slot, slot_id

logger = logging.getLogger("cache.manager")


class Cache:
    """
    Per-caller handle over the shared cache store.

    Usage:
        cache = get_cache()
        cache.start("db/design/static", "analyticsApi_1", 172800)
        result = cache.get()
        if not result.hit:
            cache.put(load_from_storage())

    A handle remembers the slot chosen by the last start(), so it must not
    be shared between threads. The store behind it is.
    """

    def __init__(self, backend: Optional[CacheBackend] = None, enabled: Optional[bool] = None):
        """
        Args:
            backend: Store to use (defaults to the process-wide one)
            enabled: Override settings.cache_enabled
        """
        self._backend = backend or get_cache_backend()
        self._enabled = settings.cache_enabled if enabled is None else enabled
        self._slot: Optional[Tuple[str, str, int]] = None

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    @property
    def slot(self) -> Optional[Tuple[str, str, int]]:
        """(group, key, ttl) designated by the last start(), if valid."""
        return self._slot

    def start(self, group: str, key: str, ttl_seconds: int) -> None:
        """
        Designate the slot used by the following get()/put().

        A malformed slot is logged and leaves the handle without a slot:
        get() then reports a miss and put() stores nothing.
        """
        if not is_valid_slot(group, key, ttl_seconds):
            logger.warning(f"Ignoring malformed cache slot: group={group!r} key={key!r} ttl={ttl_seconds!r}")
            self._slot = None
            return
        self._slot = (group, key, ttl_seconds)

    def get(self) -> CacheResult:
        """Read the current slot."""
        if self._slot is None or not self._enabled:
            return CacheResult.miss()

        group, key, _ = self._slot
        result = self._backend.read(group, key)
        if result.hit:
            logger.debug(f"CACHE HIT: {slot_id(group, key)}")
        else:
            logger.info(f"CACHE {result.status.value.upper()}: {slot_id(group, key)}")
        return result

    def get_payload(self) -> Any:
        """Payload of the current slot, or None when not cached."""
        return self.get().payload

    def put(self, payload: Any) -> None:
        """Store payload in the current slot with expiry now + ttl."""
        if self._slot is None or not self._enabled:
            return

        group, key, ttl = self._slot
        self._backend.write(group, key, payload, ttl)
        logger.debug(f"CACHE STORE: {slot_id(group, key)} [ttl={ttl}s]")


def get_cache() -> Cache:
    """Get a new handle on the global cache store."""
    return Cache()
