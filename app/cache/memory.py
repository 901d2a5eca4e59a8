"""Bounded in-process cache tier with per-entry TTL and LRU eviction."""

import threading
import time
from typing import Any, Callable, NamedTuple, Optional

from cachetools import TLRUCache

from app.cache.base import CacheStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache/memory_cache_store")


class _Entry(NamedTuple):
    value: Any
    ttl_seconds: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl_seconds


class MemoryCacheStore(CacheStore):
    """Thread-safe LRU cache whose entries expire after their TTL."""

    def __init__(
        self,
        max_entries: int = 5000,
        ttl_seconds: int = 60,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize with a capacity, a default TTL (seconds) and a clock."""
        logger.debug("Initializing MemoryCacheStore (max_entries=%s, ttl=%ss)", max_entries, ttl_seconds)
        self.ttl = ttl_seconds
        self._cache: TLRUCache = TLRUCache(maxsize=max_entries, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)

    def get(self, key: str) -> Optional[Any]:
        """Return the payload for key, refreshing its LRU position, or None."""
        with self._lock:
            entry = self._cache.get(key)
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a payload; the least recently used entry is evicted when full."""
        ttl = self.ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            return
        with self._lock:
            self._cache[key] = _Entry(value, ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
