"""BalanceApplicationService — access check, then cache-aside over the engine.

``fresh=True`` skips the cached value and replaces it with a recomputation,
for callers that just wrote and need an exact figure.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_balance.application.schemas import BalanceResponse
from src.cf_balance.domain.cache import BalanceCacheProtocol
from src.cf_balance.domain.engine import BalanceEngine
from src.cf_balance.domain.models import BalanceInfo
from src.cf_gateway.auth.dependencies import Caller
from src.cf_ledger.application.access import ensure_coffre_access
from src.cf_ledger.domain.repository import MembershipProtocol


class BalanceApplicationService:
    def __init__(
        self,
        engine: BalanceEngine,
        cache: BalanceCacheProtocol,
        members: MembershipProtocol,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._members = members

    async def get_balance_info(
        self, db: AsyncSession, coffre_id: str, fresh: bool = False
    ) -> BalanceInfo:
        """Balance without the access check, for internal callers."""

        async def compute() -> BalanceInfo:
            return await self._engine.compute_balance(db, coffre_id)

        if fresh:
            return await self._cache.refresh(coffre_id, compute)
        return await self._cache.get_or_compute(coffre_id, compute)

    async def get_balance(
        self, db: AsyncSession, caller: Caller, coffre_id: str, fresh: bool = False
    ) -> BalanceResponse:
        await ensure_coffre_access(self._members, db, caller, coffre_id)
        info = await self.get_balance_info(db, coffre_id, fresh=fresh)
        return BalanceResponse.from_info(coffre_id, info)
