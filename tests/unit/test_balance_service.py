"""Unit tests for BalanceApplicationService."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cf_balance.application.schemas import BalanceResponse
from src.cf_balance.application.service import BalanceApplicationService
from src.cf_balance.domain.cache import BalanceCache
from src.cf_balance.domain.engine import BalanceEngine
from src.cf_balance.domain.models import BalanceInfo, InventorySnapshot, MovementAmount
from src.cf_common.enums import MovementType, UserRole
from src.cf_common.errors import CoffreAccessDeniedError
from src.cf_gateway.auth.dependencies import Caller

USER = Caller(user_id="user-1", role=UserRole.USER)
ADMIN = Caller(user_id="admin-1", role=UserRole.ADMIN)
T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _store() -> AsyncMock:
    store = AsyncMock()
    store.find_latest_inventory.return_value = InventorySnapshot(Decimal("1000.00"), T0)
    store.find_movements_since.return_value = [
        MovementAmount(MovementType.ENTRY, Decimal("250.50")),
        MovementAmount(MovementType.EXIT, Decimal("80.25")),
    ]
    return store


def _members(is_member: bool = True) -> AsyncMock:
    members = AsyncMock()
    members.is_member.return_value = is_member
    return members


def _service(store: AsyncMock, clock: FakeClock, members: AsyncMock | None = None):
    return BalanceApplicationService(
        engine=BalanceEngine(store),
        cache=BalanceCache(ttl_seconds=300, clock=clock),
        members=members or _members(),
    )


class TestGetBalance:
    async def test_returns_balance_response(self) -> None:
        svc = _service(_store(), FakeClock())

        result = await svc.get_balance(MagicMock(), USER, "c-1")

        assert isinstance(result, BalanceResponse)
        assert result.coffre_id == "c-1"
        assert result.balance == Decimal("1170.25")
        assert result.balance_cents == 117025
        assert result.balance_display == "1 170,25 €"
        assert result.last_inventory_date == T0
        assert result.last_inventory_amount == Decimal("1000.00")
        assert result.last_inventory_amount_cents == 100000

    async def test_json_dump_keeps_exact_decimals(self) -> None:
        svc = _service(_store(), FakeClock())

        result = await svc.get_balance(MagicMock(), USER, "c-1")
        dumped = result.model_dump(mode="json")

        assert dumped["balance"] == "1170.25"
        assert dumped["last_inventory_amount"] == "1000.00"

    async def test_empty_coffre_is_zero(self) -> None:
        store = AsyncMock()
        store.find_latest_inventory.return_value = None
        store.find_movements_since.return_value = []
        svc = _service(store, FakeClock())

        result = await svc.get_balance(MagicMock(), ADMIN, "new-coffre")

        assert result.balance_cents == 0
        assert result.last_inventory_date is None
        assert result.last_inventory_amount_cents == 0

    async def test_non_member_denied_before_any_query(self) -> None:
        store = _store()
        svc = _service(store, FakeClock(), members=_members(False))

        with pytest.raises(CoffreAccessDeniedError) as exc_info:
            await svc.get_balance(MagicMock(), USER, "c-1")

        assert exc_info.value.http_status == 403
        store.find_latest_inventory.assert_not_awaited()

    async def test_admin_skips_membership(self) -> None:
        members = _members(False)
        svc = _service(_store(), FakeClock(), members=members)

        await svc.get_balance(MagicMock(), ADMIN, "c-1")

        members.is_member.assert_not_awaited()


class TestCaching:
    async def test_second_call_within_ttl_hits_cache(self) -> None:
        store = _store()
        clock = FakeClock()
        svc = _service(store, clock)

        first = await svc.get_balance(MagicMock(), USER, "c-1")
        clock.now = 299
        second = await svc.get_balance(MagicMock(), USER, "c-1")

        assert first == second
        assert store.find_latest_inventory.await_count == 1
        assert store.find_movements_since.await_count == 1

    async def test_after_ttl_reflects_new_data(self) -> None:
        store = _store()
        clock = FakeClock()
        svc = _service(store, clock)

        await svc.get_balance(MagicMock(), USER, "c-1")
        store.find_movements_since.return_value = [
            MovementAmount(MovementType.ENTRY, Decimal("1.00"))
        ]
        clock.now = 300
        result = await svc.get_balance(MagicMock(), USER, "c-1")

        assert result.balance_cents == 100100
        assert store.find_latest_inventory.await_count == 2

    async def test_fresh_bypasses_cache(self) -> None:
        store = _store()
        svc = _service(store, FakeClock())

        await svc.get_balance(MagicMock(), USER, "c-1")
        await svc.get_balance(MagicMock(), USER, "c-1", fresh=True)

        assert store.find_latest_inventory.await_count == 2

    async def test_get_balance_info_uses_injected_cache(self) -> None:
        cache = AsyncMock()
        cache.get_or_compute.return_value = BalanceInfo(balance_cents=5)
        svc = BalanceApplicationService(
            engine=BalanceEngine(_store()), cache=cache, members=_members()
        )

        info = await svc.get_balance_info(MagicMock(), "c-1")

        assert info.balance_cents == 5
        assert cache.get_or_compute.await_args.args[0] == "c-1"
