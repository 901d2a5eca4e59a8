"""Response cache facade over the memory and Redis tiers."""
import json
from typing import Any, Optional

import redis

from app.cache import MemoryCacheStore, RedisCacheStore, TieredCache
from app.config import settings
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache_manager")


def _init_cache() -> TieredCache:
    """Build the tiered cache, attaching Redis only when it answers a ping."""
    memory = MemoryCacheStore(max_entries=settings.cache_max_entries, ttl_seconds=settings.cache_ttl_seconds)
    if not settings.redis_enabled:
        logger.info("Redis cache tier disabled; using memory tier only")
        return TieredCache(memory, None, ttl_seconds=settings.cache_ttl_seconds)

    logger.debug(f"Initializing Redis cache tier at {settings.redis_host}:{settings.redis_port}")
    client = redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        socket_connect_timeout=settings.redis_connect_timeout_seconds,
        socket_timeout=settings.redis_connect_timeout_seconds,
    )
    shared = RedisCacheStore(client, ttl_seconds=settings.cache_ttl_seconds, prefix=settings.cache_key_prefix)
    if shared.ping():
        logger.info("Using Redis cache tier", extra={"redis_host": settings.redis_host, "redis_port": settings.redis_port})
        return TieredCache(memory, shared, ttl_seconds=settings.cache_ttl_seconds)

    logger.warning("Redis unavailable; falling back to memory tier only")
    return TieredCache(memory, None, ttl_seconds=settings.cache_ttl_seconds)


_cache: TieredCache = _init_cache()


def use_in_memory_cache_for_tests(ttl_seconds: int = 60, max_entries: int = 5000) -> TieredCache:
    """Override the cache for tests to ensure isolation and determinism."""
    global _cache
    _cache = TieredCache(MemoryCacheStore(max_entries=max_entries, ttl_seconds=ttl_seconds), None,
                         ttl_seconds=ttl_seconds)
    return _cache


def use_cache(cache: TieredCache) -> None:
    """Install a specific cache instance (tests/embedding)."""
    global _cache
    _cache = cache


def cache_key(city_name: str, date1: Optional[str] = None, date2: Optional[str] = None) -> str:
    """Key a response strictly by city and date range; absent and empty dates differ."""
    return json.dumps([city_name, date1, date2], separators=(",", ":"))


def get_cached(key: str) -> Optional[Any]:
    """Look up a cached payload."""
    return _cache.get(key)


def set_cached(key: str, payload: Any) -> None:
    """Populate both cache tiers with a payload."""
    _cache.set(key, payload, settings.cache_ttl_seconds)


def cache_status() -> dict:
    """Summarize cache tiers for the health endpoint."""
    return {"memory_entries": len(_cache.memory), "redis": _cache.has_shared_tier}


def clear_cache() -> None:
    """Clear both tiers (dev/testing)."""
    _cache.clear()
