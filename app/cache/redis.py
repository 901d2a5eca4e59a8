"""Redis-backed shared cache tier storing JSON payloads with TTL."""

import json
from typing import Any, Optional

from app.cache.base import CacheStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache/redis_cache_store")


class RedisCacheStore(CacheStore):
    """
    Shared cache tier on top of a redis-py client.

    Redis failures are logged and degrade to a miss (reads) or a skipped
    write, so an unavailable Redis never fails a request.
    """

    def __init__(self, client, ttl_seconds: int = 60, prefix: str = "weather:") -> None:
        """Initialize with a Redis client, default TTL and key prefix."""
        logger.debug("Initializing RedisCacheStore")
        self.client = client
        self.ttl = ttl_seconds
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the namespaced Redis key."""
        return f"{self.prefix}{key}"

    def ping(self) -> bool:
        """Return True if Redis answers a PING."""
        try:
            return bool(self.client.ping())
        except Exception as exc:
            logger.warning("Redis ping failed: %s", exc)
            return False

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.client.get(self._key(key))
        except Exception as exc:
            logger.error("Failed to read cache entry from Redis: %s", exc)
            return None
        if raw is None:
            return None
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            return json.loads(raw)
        except (UnicodeDecodeError, ValueError) as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            self.delete(key)
            return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            return
        try:
            payload = json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as exc:
            logger.error("Payload for %s is not JSON serializable: %s", key, exc)
            return
        try:
            self.client.setex(self._key(key), ttl, payload)
        except Exception as exc:
            logger.error("Failed to write cache entry to Redis: %s", exc)

    def delete(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except Exception as exc:
            logger.error("Failed to delete cache entry from Redis: %s", exc)

    def clear(self) -> None:
        """Best-effort removal of every key under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except Exception as exc:
            logger.error("Failed to clear cache entries from Redis: %s", exc)
