"""Response cache backends."""

from .base import CacheStore
from .memory import MemoryCacheStore
from .redis import RedisCacheStore
from .tiered import TieredCache

__all__ = [
    "CacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "TieredCache",
]
