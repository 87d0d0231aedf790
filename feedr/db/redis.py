"""Redis connection management.

Redis is optional.  When REDIS_URL is set, resolved embeds are cached
there so every worker (and every restart) shares one cache; when it is
unset, the embed cache falls back to process memory and no Redis server
is needed.  Consumers check ``redis_pool is None`` to pick a backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from feedr.core.config import SETTINGS

logger = logging.getLogger(__name__)

if SETTINGS.redis_url:
    redis_pool: aioredis.Redis | None = aioredis.from_url(  # type: ignore[type-arg]
        SETTINGS.redis_url,
        decode_responses=True,
        max_connections=20,
    )
else:
    redis_pool = None


@asynccontextmanager
async def lifespan_redis():
    """Startup/shutdown hook: ping on startup, close the pool on shutdown.

    A failed ping is logged, not raised.  Cache reads and writes already
    degrade to misses, so the app can still serve walls without Redis.
    """
    if redis_pool is None:
        logger.info("No REDIS_URL configured, embed cache is in-memory")
        yield
        return

    try:
        await redis_pool.ping()  # type: ignore[misc]
        logger.info("Redis connected: %s", SETTINGS.redis_url)
    except Exception:
        logger.exception("Redis connection failed on startup")
        yield
        return

    yield

    await redis_pool.aclose()
    logger.info("Redis connection pool closed")
