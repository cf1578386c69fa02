"""RedisBalanceCache — balance cache shared by every app instance.

Same contract as the in-process BalanceCache, with Redis owning expiry:
``SET balance:{coffre_id} <json> EX ttl``. Used when several workers or hosts
serve the same coffres and each would otherwise keep its own stale copy.

Redis errors propagate; the cache never falls back to computing silently.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

import redis.asyncio as aioredis

from src.cf_balance.domain.cache import DEFAULT_TTL_SECONDS, ComputeFn
from src.cf_balance.domain.models import BalanceInfo
from src.cf_common.datetime_utils import ensure_utc

logger = logging.getLogger("cf.balance")

_KEY_PREFIX = "balance:"


def _key(coffre_id: str) -> str:
    return f"{_KEY_PREFIX}{coffre_id}"


def encode_balance(info: BalanceInfo) -> str:
    return json.dumps({
        "balance_cents": info.balance_cents,
        "last_inventory_date": (
            info.last_inventory_date.isoformat() if info.last_inventory_date else None
        ),
        "last_inventory_amount_cents": info.last_inventory_amount_cents,
    })


def decode_balance(raw: str) -> BalanceInfo:
    payload = json.loads(raw)
    date = payload["last_inventory_date"]
    return BalanceInfo(
        balance_cents=int(payload["balance_cents"]),
        last_inventory_date=ensure_utc(datetime.fromisoformat(date)) if date else None,
        last_inventory_amount_cents=int(payload["last_inventory_amount_cents"]),
    )


class RedisBalanceCache:
    def __init__(
        self,
        client_factory: Callable[[], Awaitable[aioredis.Redis]],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._client_factory = client_factory
        self._ttl = ttl_seconds

    async def get_or_compute(self, coffre_id: str, compute_fn: ComputeFn) -> BalanceInfo:
        redis = await self._client_factory()
        raw = await redis.get(_key(coffre_id))
        if raw is not None:
            logger.debug("balance cache hit (redis): coffre %s", coffre_id)
            return decode_balance(raw)

        logger.debug("balance cache miss (redis): coffre %s", coffre_id)
        return await self.refresh(coffre_id, compute_fn)

    async def refresh(self, coffre_id: str, compute_fn: ComputeFn) -> BalanceInfo:
        value = await compute_fn()
        redis = await self._client_factory()
        # EX takes whole seconds; never round a sub-second TTL down to zero
        await redis.set(_key(coffre_id), encode_balance(value), ex=max(1, int(self._ttl)))
        return value

    async def invalidate(self, coffre_id: str) -> None:
        redis = await self._client_factory()
        await redis.delete(_key(coffre_id))
