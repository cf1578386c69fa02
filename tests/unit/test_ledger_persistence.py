"""Unit tests for LedgerRepository using a MagicMock AsyncSession."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cf_common.enums import MovementType
from src.cf_common.errors import InternalError
from src.cf_ledger.domain.models import CashCount, CountLine
from src.cf_ledger.infrastructure.persistence import LedgerRepository

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
COUNT = CashCount(
    lines=(
        CountLine(denomination_cents=5000, quantity=2),
        CountLine(denomination_cents=50, quantity=1),
    )
)


def _movement_row(**overrides: object) -> MagicMock:
    row = MagicMock()
    row.id = 42
    row.coffre_id = "c-1"
    row.user_id = "user-1"
    row.type = "ENTRY"
    row.amount = Decimal("100.50")
    row.description = None
    row.created_at = T0
    row.deleted_at = None
    for key, value in overrides.items():
        setattr(row, key, value)
    return row


def _result(row: object) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


@pytest.fixture
def db() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    return session


class TestCreateMovement:
    async def test_inserts_movement_then_details(self, db) -> None:
        db.execute.return_value = _result(_movement_row())

        movement = await LedgerRepository().create_movement(
            db, 42, "c-1", "user-1", MovementType.ENTRY, COUNT, None
        )

        assert movement.id == 42
        assert movement.type is MovementType.ENTRY
        assert movement.details == list(COUNT.lines)
        assert db.execute.await_count == 2
        _, params = db.execute.await_args_list[0].args
        assert params["amount"] == Decimal("100.50")
        assert params["type"] == "ENTRY"
        _, detail_params = db.execute.await_args_list[1].args
        assert detail_params == [
            {"movement_id": 42, "denomination_cents": 5000, "quantity": 2},
            {"movement_id": 42, "denomination_cents": 50, "quantity": 1},
        ]

    async def test_missing_returning_row_raises(self, db) -> None:
        db.execute.return_value = _result(None)

        with pytest.raises(InternalError):
            await LedgerRepository().create_movement(
                db, 42, "c-1", "user-1", MovementType.ENTRY, COUNT, None
            )


class TestUpdateMovement:
    async def test_keeps_amount_when_count_omitted(self, db) -> None:
        db.execute.side_effect = [
            _result(_movement_row(type="EXIT")),
            MagicMock(scalars=MagicMock(return_value=MagicMock(all=MagicMock(return_value=[])))),
        ]

        movement = await LedgerRepository().update_movement(
            db, 42, MovementType.EXIT, None, "corrigé"
        )

        assert movement is not None
        assert movement.type is MovementType.EXIT
        _, params = db.execute.await_args_list[0].args
        assert params["amount"] is None
        assert params["description"] == "corrigé"

    async def test_replaces_details_when_count_given(self, db) -> None:
        db.execute.side_effect = [_result(_movement_row()), MagicMock(), MagicMock()]

        movement = await LedgerRepository().update_movement(
            db, 42, MovementType.ENTRY, COUNT, None
        )

        assert movement is not None
        assert movement.details == list(COUNT.lines)
        delete_sql, delete_params = db.execute.await_args_list[1].args
        assert "DELETE FROM movement_details" in delete_sql.text
        assert delete_params == {"movement_id": 42}

    async def test_deleted_or_missing_returns_none(self, db) -> None:
        db.execute.return_value = _result(None)

        assert (
            await LedgerRepository().update_movement(db, 42, MovementType.ENTRY, None, None)
            is None
        )
        sql, _ = db.execute.await_args.args
        assert "deleted_at IS NULL" in sql.text


class TestSoftDelete:
    async def test_returns_deleted_movement(self, db) -> None:
        db.execute.return_value = _result(_movement_row(deleted_at=T0))

        movement = await LedgerRepository().soft_delete_movement(db, 42)

        assert movement is not None
        assert movement.is_deleted

    async def test_returns_none_when_nothing_updated(self, db) -> None:
        db.execute.return_value = _result(None)
        assert await LedgerRepository().soft_delete_movement(db, 42) is None


class TestCreateInventory:
    async def test_empty_count_skips_detail_insert(self, db) -> None:
        row = MagicMock(
            id=9, coffre_id="c-1", user_id="user-1",
            total_amount=Decimal("0.00"), notes=None, created_at=T0,
        )
        db.execute.return_value = _result(row)

        inventory = await LedgerRepository().create_inventory(
            db, 9, "c-1", "user-1", CashCount(lines=()), None
        )

        assert inventory.total_amount == Decimal("0.00")
        assert inventory.details == []
        assert db.execute.await_count == 1
        _, params = db.execute.await_args.args
        assert params["total_amount"] == Decimal("0.00")


class TestIsMember:
    async def test_member(self, db) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = "user-1"
        db.execute.return_value = result

        assert await LedgerRepository().is_member(db, "user-1", "c-1") is True

    async def test_not_member(self, db) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute.return_value = result

        assert await LedgerRepository().is_member(db, "user-2", "c-1") is False

    async def test_coffre_exists(self, db) -> None:
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute.return_value = result

        assert await LedgerRepository().coffre_exists(db, "ghost") is False
