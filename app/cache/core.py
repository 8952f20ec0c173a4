"""
Core cache data structures.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any


class CacheStatus(Enum):
    """Outcome of a slot lookup."""
    HIT = "hit"           # Present and within TTL
    MISS = "miss"         # Never stored (or removed)
    EXPIRED = "expired"   # Stored but past its TTL


@dataclass(frozen=True)
class CacheResult:
    """
    Result of reading a cache slot.

    A HIT may carry an empty payload (None, "" or []): that is a cached
    empty result, not a miss.
    """
    status: CacheStatus
    payload: Any = None

    @property
    def hit(self) -> bool:
        return self.status is CacheStatus.HIT

    @classmethod
    def hit_with(cls, payload: Any) -> "CacheResult":
        return cls(CacheStatus.HIT, payload)

    @classmethod
    def miss(cls) -> "CacheResult":
        return cls(CacheStatus.MISS)

    @classmethod
    def expired(cls) -> "CacheResult":
        return cls(CacheStatus.EXPIRED)


@dataclass
class CacheEntry:
    """
    A cached payload with its creation time and TTL.
    """
    payload: Any
    created_at: float  # seconds since epoch
    ttl_seconds: int

    @property
    def expires_at(self) -> float:
        return self.created_at + self.ttl_seconds

    def is_expired(self, now: float) -> bool:
        """Expired once the TTL has fully elapsed."""
        return now >= self.expires_at

    def age_seconds(self, now: float) -> float:
        return now - self.created_at

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON storage."""
        return {
            "payload": self.payload,
            "created_at": self.created_at,
            "ttl_seconds": self.ttl_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CacheEntry":
        return cls(
            payload=data["payload"],
            created_at=float(data["created_at"]),
            ttl_seconds=int(data["ttl_seconds"]),
        )


_SEGMENT = re.compile(r"[A-Za-z0-9_.\-]+")


def _is_valid_segment(segment: str) -> bool:
    return bool(_SEGMENT.fullmatch(segment)) and ".." not in segment and segment != "."


def is_valid_slot(group: Any, key: Any, ttl_seconds: Any) -> bool:
    """
    Check that (group, key, ttl) can address a slot.

    Group is one or more "/"-separated segments, key a single segment.
    Segments never contain "..", so slots map safely onto file paths.
    """
    if not isinstance(group, str) or not isinstance(key, str):
        return False
    if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int) or ttl_seconds <= 0:
        return False
    if not group or not all(_is_valid_segment(part) for part in group.split("/")):
        return False
    return _is_valid_segment(key)


def slot_id(group: str, key: str) -> str:
    """Flat identifier for a slot."""
    return f"{group}/{key}"
