import unittest
from unittest.mock import MagicMock, patch

import redis

from app import cache_manager
from app.cache import MemoryCacheStore, RedisCacheStore, TieredCache
from app.config import settings


class FakeRedis:
    def __init__(self):
        self.store = {}

    def setex(self, key, ttl, value):
        self.store[key] = value

    def get(self, key):
        return self.store.get(key)


class TestCacheKey(unittest.TestCase):
    def test_distinct_date_ranges_get_distinct_keys(self):
        keys = {
            cache_manager.cache_key("London"),
            cache_manager.cache_key("London", "2024-01-01"),
            cache_manager.cache_key("London", "2024-01-01", "2024-01-05"),
            cache_manager.cache_key("London", None, "2024-01-05"),
        }
        self.assertEqual(len(keys), 4)

    def test_empty_date_differs_from_absent_date(self):
        self.assertNotEqual(cache_manager.cache_key("London"), cache_manager.cache_key("London", ""))
        self.assertNotEqual(cache_manager.cache_key("London", "2024-01-01"),
                            cache_manager.cache_key("London", "2024-01-01", ""))

    def test_separator_characters_do_not_collide(self):
        self.assertNotEqual(cache_manager.cache_key("a:b"), cache_manager.cache_key("a", "b:"))
        self.assertNotEqual(cache_manager.cache_key('a","b'), cache_manager.cache_key("a", "b"))

    def test_key_is_stable(self):
        self.assertEqual(cache_manager.cache_key("Rome", "2024-01-01"), cache_manager.cache_key("Rome", "2024-01-01"))


class TestCacheManager(unittest.TestCase):
    def tearDown(self):
        cache_manager.use_in_memory_cache_for_tests()

    def test_set_and_get_through_facade(self):
        cache_manager.use_in_memory_cache_for_tests()
        key = cache_manager.cache_key("Rome")
        self.assertIsNone(cache_manager.get_cached(key))
        cache_manager.set_cached(key, {"temp": 20})
        self.assertEqual(cache_manager.get_cached(key), {"temp": 20})
        self.assertEqual(cache_manager.cache_status(), {"memory_entries": 1, "redis": False})
        cache_manager.clear_cache()
        self.assertIsNone(cache_manager.get_cached(key))

    def test_redis_tier_is_reported_and_populated(self):
        client = FakeRedis()
        cache = TieredCache(MemoryCacheStore(), RedisCacheStore(client, prefix="weather:"))
        cache_manager.use_cache(cache)
        key = cache_manager.cache_key("Oslo")
        cache_manager.set_cached(key, [1, 2])
        self.assertIn(f"weather:{key}", client.store)
        self.assertTrue(cache_manager.cache_status()["redis"])


class TestInitCache(unittest.TestCase):
    def setUp(self):
        self._orig_enabled = settings.redis_enabled

    def tearDown(self):
        settings.redis_enabled = self._orig_enabled

    def test_unreachable_redis_falls_back_to_memory_tier(self):
        settings.redis_enabled = True
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("connection refused")
        with patch.object(cache_manager.redis, "Redis", return_value=client):
            cache = cache_manager._init_cache()
        self.assertFalse(cache.has_shared_tier)
        self.assertEqual(cache.memory.get("missing"), None)

    def test_reachable_redis_is_attached_as_shared_tier(self):
        settings.redis_enabled = True
        client = MagicMock()
        client.ping.return_value = True
        with patch.object(cache_manager.redis, "Redis", return_value=client) as redis_cls:
            cache = cache_manager._init_cache()
        self.assertTrue(cache.has_shared_tier)
        kwargs = redis_cls.call_args.kwargs
        self.assertEqual(kwargs["host"], settings.redis_host)
        self.assertEqual(kwargs["port"], settings.redis_port)

    def test_disabled_redis_is_never_contacted(self):
        settings.redis_enabled = False
        with patch.object(cache_manager.redis, "Redis") as redis_cls:
            cache = cache_manager._init_cache()
        self.assertFalse(cache.has_shared_tier)
        redis_cls.assert_not_called()


if __name__ == "__main__":
    unittest.main()
