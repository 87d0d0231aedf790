"""Cache of successful embed resolutions, keyed by platform and URL.

Adding the same post to several walls (or re-adding it) should not hit
the provider every time.  Only successful lookups are cached; a fallback
is retried on the next add, since providers are often only briefly
unavailable.  Entries expire after EMBED_CACHE_TTL_SECONDS so edited
titles and revoked embeds eventually refresh.

Backend follows the Redis-or-memory pattern of feedr.db.redis.  Redis
errors degrade to a cache miss and are logged, never raised: the cache
must not be the reason an add-url request fails.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Protocol, runtime_checkable

from feedr.db.redis import redis_pool

logger = logging.getLogger(__name__)


def cache_key(platform: str, url: str) -> str:
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:32]
    return f"{platform}:{digest}"


@runtime_checkable
class EmbedCache(Protocol):
    async def get(self, key: str) -> dict[str, str] | None:
        """Cached {provider, title, html}, or None on miss."""
        ...

    async def set(self, key: str, value: dict[str, str], ttl_seconds: int) -> None: ...


class InMemoryEmbedCache:
    """Process-local cache with lazy TTL expiry."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[float, dict[str, str]]] = {}

    async def get(self, key: str) -> dict[str, str] | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= time.monotonic():
            del self._store[key]
            return None
        return dict(value)

    async def set(self, key: str, value: dict[str, str], ttl_seconds: int) -> None:
        self._store[key] = (time.monotonic() + ttl_seconds, dict(value))

    def clear(self) -> None:
        self._store.clear()


class RedisEmbedCache:
    """Redis-backed cache shared by every worker."""

    _PREFIX = "embed:"

    def __init__(self, redis_client) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> dict[str, str] | None:
        try:
            raw = await self._redis.get(f"{self._PREFIX}{key}")
        except Exception:
            logger.warning("Embed cache read failed key=%s", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed embed cache entry key=%s", key)
            return None
        return value if isinstance(value, dict) else None

    async def set(self, key: str, value: dict[str, str], ttl_seconds: int) -> None:
        try:
            await self._redis.setex(
                f"{self._PREFIX}{key}", ttl_seconds, json.dumps(value)
            )
        except Exception:
            logger.warning("Embed cache write failed key=%s", key, exc_info=True)


if redis_pool is not None:
    embed_cache: EmbedCache = RedisEmbedCache(redis_pool)
else:
    embed_cache = InMemoryEmbedCache()
