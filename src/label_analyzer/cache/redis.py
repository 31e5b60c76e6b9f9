"""Redis connection pool management for the classification cache.

The pool is created during application startup (lifespan) and closed on
shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from label_analyzer.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from label_analyzer.core.config import Settings

logger = get_logger(__name__)


class _RedisHolder:
    pool: ConnectionPool[Any] | None = None
    client: Redis[Any] | None = None


async def init_redis_pool(settings: Settings) -> Redis[Any]:
    """Create the cache connection pool and verify it with a ping.

    Raises:
        redis.ConnectionError: If Redis cannot be reached.
    """
    logger.info(
        "Initializing Redis connection",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.cache_db,
    )

    _RedisHolder.pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=settings.redis.max_connections,
        decode_responses=False,
    )
    _RedisHolder.client = redis.Redis(connection_pool=_RedisHolder.pool)

    try:
        await _RedisHolder.client.ping()
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        await close_redis_pool()
        raise

    logger.info("Redis connection established")
    return _RedisHolder.client


async def close_redis_pool() -> None:
    """Close the cache client and its pool."""
    if _RedisHolder.client is not None:
        await _RedisHolder.client.aclose()
        _RedisHolder.client = None
    if _RedisHolder.pool is not None:
        await _RedisHolder.pool.disconnect()
        _RedisHolder.pool = None
    logger.info("Redis connection closed")


def get_cache_client() -> Redis[Any]:
    """Get the cache Redis client.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _RedisHolder.client is None:
        msg = "Redis cache client not initialized. Call init_redis_pool() first."
        raise RuntimeError(msg)
    return _RedisHolder.client


async def check_redis_health() -> str:
    """Return "healthy", "unhealthy" or "not_initialized"."""
    if _RedisHolder.client is None:
        return "not_initialized"
    try:
        await _RedisHolder.client.ping()
    except (redis.ConnectionError, redis.TimeoutError):
        return "unhealthy"
    return "healthy"
