from __future__ import annotations

import asyncio

from feedr.services.embed_cache import RedisEmbedCache, cache_key


class _FakeRedis:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.data[key] = value
        self.ttls[key] = ttl


class _DownRedis:
    async def get(self, key: str) -> str | None:
        raise ConnectionError("redis down")

    async def setex(self, key: str, ttl: int, value: str) -> None:
        raise ConnectionError("redis down")


def test_cache_key_is_stable_and_platform_scoped() -> None:
    a = cache_key("youtube", "https://youtu.be/x")
    assert a == cache_key("youtube", "https://youtu.be/x")
    assert a != cache_key("tiktok", "https://youtu.be/x")
    assert a.startswith("youtube:")


def test_redis_cache_roundtrip_with_prefix_and_ttl() -> None:
    fake = _FakeRedis()
    cache = RedisEmbedCache(fake)
    value = {"provider": "YouTube", "title": "t", "html": "<i></i>"}

    asyncio.run(cache.set("youtube:abc", value, 60))

    assert fake.ttls == {"embed:youtube:abc": 60}
    assert asyncio.run(cache.get("youtube:abc")) == value
    assert asyncio.run(cache.get("youtube:other")) is None


def test_redis_cache_discards_malformed_entries() -> None:
    fake = _FakeRedis()
    fake.data["embed:k"] = "{not json"
    assert asyncio.run(RedisEmbedCache(fake).get("k")) is None


def test_redis_errors_degrade_to_miss() -> None:
    cache = RedisEmbedCache(_DownRedis())
    asyncio.run(cache.set("k", {"html": "x"}, 60))
    assert asyncio.run(cache.get("k")) is None
