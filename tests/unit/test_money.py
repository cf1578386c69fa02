"""Tests for cf_common.money — integer cents conversions."""

from decimal import Decimal

import pytest

from src.cf_common.money import cents_to_display, from_minor_units, to_minor_units


class TestToMinorUnits:
    def test_decimal(self) -> None:
        assert to_minor_units(Decimal("1170.25")) == 117025

    def test_int_euros(self) -> None:
        assert to_minor_units(1000) == 100000

    def test_string(self) -> None:
        assert to_minor_units("80.25") == 8025

    def test_half_cent_rounds_up(self) -> None:
        assert to_minor_units(Decimal("50.005")) == 5001

    def test_float_goes_through_str(self) -> None:
        # binary 50.005 is 50.00499999..., the str path keeps the written value
        assert to_minor_units(50.005) == 5001

    def test_float_classic_drift_value(self) -> None:
        assert to_minor_units(0.1 + 0.2) == 30

    def test_below_half_cent_rounds_down(self) -> None:
        assert to_minor_units(Decimal("10.004")) == 1000

    def test_zero(self) -> None:
        assert to_minor_units(Decimal("0.00")) == 0

    def test_negative_zero(self) -> None:
        assert to_minor_units(Decimal("-0.00")) == 0

    def test_garbage_raises(self) -> None:
        with pytest.raises(ArithmeticError):
            to_minor_units("abc")


class TestFromMinorUnits:
    def test_basic(self) -> None:
        assert from_minor_units(117025) == Decimal("1170.25")

    def test_keeps_two_places(self) -> None:
        assert str(from_minor_units(100000)) == "1000.00"

    def test_negative(self) -> None:
        assert from_minor_units(-1) == Decimal("-0.01")

    def test_zero_is_positive(self) -> None:
        zero = from_minor_units(0)
        assert zero == 0
        assert not zero.is_signed()
        assert str(zero) == "0.00"


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(6500) == "65,00 €"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "0,00 €"

    def test_one_cent(self) -> None:
        assert cents_to_display(1) == "0,01 €"

    def test_thousands(self) -> None:
        assert cents_to_display(117025) == "1 170,25 €"

    def test_negative(self) -> None:
        assert cents_to_display(-120001) == "-1 200,01 €"
