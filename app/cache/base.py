"""Shared protocol for cache backends."""

from typing import Any, Optional, Protocol


class CacheStore(Protocol):
    """Protocol for key/value stores holding upstream JSON payloads."""

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on a miss or expiry."""

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a payload, expiring after `ttl_seconds` (store default when None)."""

    def delete(self, key: str) -> None:
        """Remove a key without raising if it is absent."""

    def clear(self) -> None:
        """Drop every entry owned by this store."""
