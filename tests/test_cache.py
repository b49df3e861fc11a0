"""Tests for the Redis cache wrapper."""

from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from shortcodes.database.cache import RedisCache


class TestRedisCache:
    """Test cache behaviour without a live Redis."""

    async def test_disabled_without_url(self):
        cache = RedisCache(redis_url=None)

        await cache.connect()

        assert not cache.enabled
        assert await cache.get("key") is None
        assert await cache.set("key", "value") is False
        assert await cache.ping()

    def test_cache_key(self):
        assert RedisCache().get_cache_key("a1") == "shortcodes:code:a1"

    async def test_set_uses_default_ttl(self):
        cache = RedisCache(redis_url="redis://localhost:6379/0", ttl_seconds=60)
        cache.client = AsyncMock()

        assert await cache.set("key", "value")
        cache.client.setex.assert_awaited_once_with("key", 60, "value")

    async def test_errors_are_misses(self):
        """A failing Redis never fails the caller."""
        cache = RedisCache(redis_url="redis://localhost:6379/0")
        cache.client = AsyncMock()
        cache.client.get.side_effect = RedisConnectionError("down")
        cache.client.setex.side_effect = RedisConnectionError("down")
        cache.client.ping.side_effect = RedisConnectionError("down")

        assert await cache.get("key") is None
        assert await cache.set("key", "value") is False
        assert not await cache.ping()
