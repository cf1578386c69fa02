"""Tests for cf_ledger.domain.billets — banknote/coin counts."""

import pytest

from src.cf_common.errors import CountTooLargeError, InvalidDenominationError
from src.cf_common.money import MAX_AMOUNT_CENTS
from src.cf_ledger.domain.billets import MAX_QUANTITY, count_billets, parse_denomination
from src.cf_ledger.domain.models import CountLine


class TestParseDenomination:
    @pytest.mark.parametrize(
        ("key", "cents"),
        [("500", 50000), ("50", 5000), ("5", 500), ("2", 200), ("0.5", 50), ("0.50", 50),
         ("0.01", 1), (" 20 ", 2000), ("5.00", 500)],
    )
    def test_known(self, key: str, cents: int) -> None:
        assert parse_denomination(key) == cents

    @pytest.mark.parametrize(
        "key",
        ["3", "1000", "0.03", "0.005", "abc", "", "-5", "NaN", "Infinity", "1E+999999", "5E-999999"],
    )
    def test_unknown_raises(self, key: str) -> None:
        with pytest.raises(InvalidDenominationError) as exc_info:
            parse_denomination(key)
        assert exc_info.value.code == 3003


class TestCountBillets:
    def test_total_in_cents(self) -> None:
        count = count_billets({"50": 3, "20": 1, "0.5": 4})
        assert count.total_cents == 15000 + 2000 + 200

    def test_lines_sorted_descending_and_zero_dropped(self) -> None:
        count = count_billets({"0.1": 2, "100": 1, "10": 0})
        assert count.lines == (
            CountLine(denomination_cents=10000, quantity=1),
            CountLine(denomination_cents=10, quantity=2),
        )

    def test_equivalent_keys_are_merged(self) -> None:
        count = count_billets({"5": 1, "5.00": 2})
        assert count.lines == (CountLine(denomination_cents=500, quantity=3),)

    def test_empty_count_is_zero(self) -> None:
        assert count_billets({}).total_cents == 0
        assert count_billets({"50": 0}).lines == ()

    def test_cents_stay_exact(self) -> None:
        # 0.1 + 0.2 drifts in float; in cents it is 30
        assert count_billets({"0.1": 1, "0.2": 1}).total_cents == 30

    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(ValueError, match=">= 0"):
            count_billets({"50": -1})

    def test_unknown_denomination_rejected(self) -> None:
        with pytest.raises(InvalidDenominationError):
            count_billets({"50": 1, "7": 1})

    def test_overflowing_exponent_is_unknown_denomination(self) -> None:
        with pytest.raises(InvalidDenominationError) as exc_info:
            count_billets({"1E+999999": 1})
        assert exc_info.value.code == 3003


class TestCountLimits:
    def test_total_at_column_limit_accepted(self) -> None:
        # 9 999 999 999.99 € = 19 999 999 × 500 € + 499.99 €
        count = count_billets(
            {"500": 19_999_999, "200": 2, "50": 1, "20": 2, "5": 1, "2": 2,
             "0.5": 1, "0.2": 2, "0.05": 1, "0.02": 2}
        )
        assert count.total_cents == MAX_AMOUNT_CENTS

    def test_total_above_column_limit_rejected(self) -> None:
        with pytest.raises(CountTooLargeError) as exc_info:
            count_billets({"500": 20_000_000})
        assert exc_info.value.code == 3005
        assert exc_info.value.http_status == 422

    def test_huge_quantity_rejected(self) -> None:
        with pytest.raises(CountTooLargeError):
            count_billets({"500": 10**15})

    def test_merged_quantity_above_integer_rejected(self) -> None:
        with pytest.raises(CountTooLargeError):
            count_billets({"0.01": MAX_QUANTITY, "0.010": 1})

    def test_max_quantity_of_cents_accepted(self) -> None:
        count = count_billets({"0.01": MAX_QUANTITY})
        assert count.lines == (CountLine(denomination_cents=1, quantity=MAX_QUANTITY),)
