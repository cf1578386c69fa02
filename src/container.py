"""Service composition root.

Builds the one balance cache of the process and hands the same instance to
the read side (balance) and the write side (ledger, for invalidation).
main.py stores the container on ``app.state``; routers read it from there.
"""

from dataclasses import dataclass

from config.settings import Settings
from src.cf_balance.application.service import BalanceApplicationService
from src.cf_balance.domain.cache import BalanceCache, BalanceCacheProtocol
from src.cf_balance.domain.engine import BalanceEngine
from src.cf_balance.infrastructure.persistence import LedgerStore
from src.cf_balance.infrastructure.redis_cache import RedisBalanceCache
from src.cf_common.redis_client import get_redis
from src.cf_ledger.application.service import LedgerApplicationService
from src.cf_ledger.infrastructure.persistence import LedgerRepository


@dataclass(frozen=True)
class ServiceContainer:
    cache: BalanceCacheProtocol
    balance_service: BalanceApplicationService
    ledger_service: LedgerApplicationService


def build_cache(settings: Settings) -> BalanceCacheProtocol:
    ttl = settings.BALANCE_CACHE_TTL_SECONDS
    if settings.BALANCE_CACHE_BACKEND == "memory":
        return BalanceCache(ttl_seconds=ttl)
    return RedisBalanceCache(get_redis, ttl_seconds=ttl)


def build_container(settings: Settings) -> ServiceContainer:
    cache = build_cache(settings)
    repo = LedgerRepository()
    return ServiceContainer(
        cache=cache,
        balance_service=BalanceApplicationService(
            engine=BalanceEngine(LedgerStore()),
            cache=cache,
            members=repo,
        ),
        ledger_service=LedgerApplicationService(repo=repo, cache=cache),
    )
