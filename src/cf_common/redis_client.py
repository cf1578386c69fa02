"""Redis client factory — backs the shared balance cache (BALANCE_CACHE_BACKEND="redis").

Ledger data itself always lives in PostgreSQL; Redis only holds derived
balances, so losing it costs a recomputation and nothing else. The pool is
created lazily: with the in-memory backend no connection is ever opened.
"""

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool if one was opened."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
