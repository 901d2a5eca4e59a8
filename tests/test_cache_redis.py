import json
import unittest

from app.cache.redis import RedisCacheStore


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.expires = {}

    def ping(self):
        return True

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.expires[key] = ttl

    def get(self, key):
        return self.store.get(key)

    def delete(self, key):
        self.store.pop(key, None)
        self.expires.pop(key, None)

    def scan_iter(self, pattern):
        prefix = pattern.rstrip("*")
        return [k for k in list(self.store.keys()) if k.startswith(prefix)]


class BrokenRedis:
    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise ConnectionError("redis down")
        return _fail


class TestRedisCacheStore(unittest.TestCase):
    def test_set_and_get_roundtrip_with_prefix_and_ttl(self):
        client = FakeRedis()
        store = RedisCacheStore(client, ttl_seconds=60, prefix="weather:")
        store.set("London::", {"days": [1, 2]})
        self.assertIn("weather:London::", client.store)
        self.assertEqual(client.expires["weather:London::"], 60)
        self.assertEqual(json.loads(client.store["weather:London::"]), {"days": [1, 2]})
        self.assertEqual(store.get("London::"), {"days": [1, 2]})

    def test_miss_returns_none(self):
        store = RedisCacheStore(FakeRedis())
        self.assertIsNone(store.get("nope"))

    def test_undecodable_entry_is_discarded(self):
        client = FakeRedis()
        client.store["weather:bad"] = b"{not json"
        store = RedisCacheStore(client)
        self.assertIsNone(store.get("bad"))
        self.assertNotIn("weather:bad", client.store)

    def test_clear_only_touches_prefix(self):
        client = FakeRedis()
        client.store["other:key"] = b"1"
        store = RedisCacheStore(client, prefix="weather:")
        store.set("a", 1)
        store.set("b", 2)
        store.clear()
        self.assertEqual(list(client.store.keys()), ["other:key"])

    def test_redis_failures_degrade_to_miss(self):
        store = RedisCacheStore(BrokenRedis())
        self.assertFalse(store.ping())
        self.assertIsNone(store.get("a"))
        store.set("a", 1)
        store.delete("a")
        store.clear()


if __name__ == "__main__":
    unittest.main()
