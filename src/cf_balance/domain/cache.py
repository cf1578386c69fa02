"""Coffre balance cache — in-process, pure TTL.

Cache-aside: check entry → on miss run the compute function → store with
expires_at = now + ttl. A hit requires now < expires_at.

No invalidation on ledger writes happens here; write paths that need the next
read to be exact call ``invalidate`` themselves. Until then a balance may be up
to ``ttl`` seconds stale.

Two concurrent misses on the same coffre may both compute; the last store wins.
Computation is read-only and idempotent, so that costs work, not correctness.
The lock only guards the dict and is never held while computing.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from src.cf_balance.domain.models import BalanceInfo

logger = logging.getLogger("cf.balance")

DEFAULT_TTL_SECONDS = 300.0

Clock = Callable[[], float]
ComputeFn = Callable[[], Awaitable[BalanceInfo]]


class BalanceCacheProtocol(Protocol):
    """Shared surface of the in-process and Redis balance caches."""

    async def get_or_compute(self, coffre_id: str, compute_fn: ComputeFn) -> BalanceInfo: ...

    async def refresh(self, coffre_id: str, compute_fn: ComputeFn) -> BalanceInfo: ...

    async def invalidate(self, coffre_id: str) -> None: ...


@dataclass(frozen=True)
class _Entry:
    value: BalanceInfo
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    total: int
    valid: int
    expired: int


class BalanceCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _lookup(self, coffre_id: str) -> BalanceInfo | None:
        with self._lock:
            entry = self._entries.get(coffre_id)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[coffre_id]
                return None
            return entry.value

    def _store(self, coffre_id: str, value: BalanceInfo) -> None:
        with self._lock:
            self._entries[coffre_id] = _Entry(value, self._clock() + self._ttl)

    async def get_or_compute(self, coffre_id: str, compute_fn: ComputeFn) -> BalanceInfo:
        cached = self._lookup(coffre_id)
        if cached is not None:
            logger.debug("balance cache hit: coffre %s", coffre_id)
            return cached

        logger.debug("balance cache miss: coffre %s", coffre_id)
        value = await compute_fn()
        self._store(coffre_id, value)
        return value

    async def refresh(self, coffre_id: str, compute_fn: ComputeFn) -> BalanceInfo:
        """Recompute unconditionally and replace the entry."""
        value = await compute_fn()
        self._store(coffre_id, value)
        return value

    async def invalidate(self, coffre_id: str) -> None:
        with self._lock:
            self._entries.pop(coffre_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries, return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info("balance cache cleanup: %d entries removed", len(expired))
        return len(expired)

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            expired = sum(1 for e in self._entries.values() if now >= e.expires_at)
            total = len(self._entries)
        return CacheStats(total=total, valid=total - expired, expired=expired)


async def run_purge_loop(cache: BalanceCache, interval_seconds: float) -> None:
    """Sweep expired entries every ``interval_seconds`` until cancelled."""
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            cache.purge_expired()
    except asyncio.CancelledError:
        logger.debug("balance cache purge loop stopped")
        raise
