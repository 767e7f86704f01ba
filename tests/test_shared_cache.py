"""
Tests for the list cache (in-memory backend).
"""

from unittest.mock import MagicMock, patch

import redis

from app.shared.cache import CacheClient


class TestMemoryCache:
    """Tests for CacheClient without Redis."""

    def test_backend_is_memory_without_url(self) -> None:
        assert CacheClient().backend == "memory"

    def test_get_or_set_computes_once(self) -> None:
        cache = CacheClient()
        factory = MagicMock(return_value=[{"name": "Rice"}])

        first = cache.get_or_set("commodities:all", factory)
        second = cache.get_or_set("commodities:all", factory)

        assert first == second == [{"name": "Rice"}]
        factory.assert_called_once()

    def test_empty_list_is_a_hit(self) -> None:
        cache = CacheClient()
        factory = MagicMock(return_value=[])
        cache.get_or_set("lands:all", factory)
        cache.get_or_set("lands:all", factory)
        factory.assert_called_once()

    def test_entries_expire(self) -> None:
        cache = CacheClient(default_ttl=10)
        with patch("app.shared.cache.time.monotonic", return_value=1000.0):
            cache.set("prices:all", [1])
        with patch("app.shared.cache.time.monotonic", return_value=1009.0):
            assert cache.get("prices:all") == [1]
        with patch("app.shared.cache.time.monotonic", return_value=1010.0):
            assert cache.get("prices:all") is None

    def test_zero_ttl_is_not_replaced_by_default(self) -> None:
        cache = CacheClient(default_ttl=300)
        factory = MagicMock(return_value=[1])

        cache.set("prices:all", [1], ttl=0)
        assert cache.get("prices:all") is None

        cache.get_or_set("prices:all", factory, ttl=0)
        cache.get_or_set("prices:all", factory, ttl=0)
        assert factory.call_count == 2

    def test_zero_ttl_skips_redis_write(self) -> None:
        client = MagicMock()
        with patch("app.shared.cache.redis.from_url", return_value=client):
            cache = CacheClient(redis_url="redis://localhost:6379/0", default_ttl=300)
        cache.set("prices:all", [1], ttl=0)
        client.setex.assert_not_called()

    def test_invalidate_by_prefix(self) -> None:
        cache = CacheClient()
        cache.set("prices:all", [1])
        cache.set("prices:other", [2])
        cache.set("demands:all", [3])

        assert cache.invalidate("prices:") == 2
        assert cache.get("prices:all") is None
        assert cache.get("demands:all") == [3]

    def test_unreachable_redis_falls_back(self) -> None:
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("refused")
        with patch("app.shared.cache.redis.from_url", return_value=client):
            cache = CacheClient(redis_url="redis://localhost:6379/0")
        assert cache.backend == "memory"
        cache.set("k", {"a": 1})
        assert cache.get("k") == {"a": 1}
