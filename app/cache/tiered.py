"""Two-tier lookaside cache: in-process tier first, shared tier second."""

from typing import Any, Optional

from app.cache.base import CacheStore
from app.cache.memory import MemoryCacheStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache/tiered_cache")


class TieredCache:
    """
    Lookaside cache over a fast local tier and an optional shared tier.

    Reads check the local tier, then the shared tier; a shared hit is copied
    into the local tier. Writes go to both. There is no single-flight: two
    concurrent misses on one key both reach the caller's loader.
    """

    def __init__(self, memory: MemoryCacheStore, shared: Optional[CacheStore] = None,
                 ttl_seconds: int = 60) -> None:
        self.memory = memory
        self.shared = shared
        self.ttl = ttl_seconds

    @property
    def has_shared_tier(self) -> bool:
        return self.shared is not None

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload or None."""
        value = self.memory.get(key)
        if value is not None:
            logger.debug("Memory cache hit for %s", key)
            return value
        if self.shared is None:
            return None
        value = self.shared.get(key)
        if value is None:
            return None
        logger.debug("Shared cache hit for %s; back-filling memory tier", key)
        self.memory.set(key, value, self.ttl)
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Populate both tiers."""
        ttl = self.ttl if ttl_seconds is None else ttl_seconds
        self.memory.set(key, value, ttl)
        if self.shared is not None:
            self.shared.set(key, value, ttl)

    def delete(self, key: str) -> None:
        self.memory.delete(key)
        if self.shared is not None:
            self.shared.delete(key)

    def clear(self) -> None:
        self.memory.clear()
        if self.shared is not None:
            self.shared.clear()
