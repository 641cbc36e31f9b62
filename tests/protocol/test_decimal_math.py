"""Tests for the engine decimal helpers."""

from decimal import Decimal

from src.protocol.decimal_math import INFINITY, decimal_to_str, quantize, to_decimal


class TestQuantize:
    def test_rounds_half_even(self) -> None:
        assert quantize(Decimal("2.955"), 2) == Decimal("2.96")
        assert quantize(Decimal("2.965"), 2) == Decimal("2.96")

    def test_non_finite_passes_through(self) -> None:
        assert quantize(INFINITY, 2).is_infinite()
        assert quantize(Decimal("NaN"), 2).is_nan()

    def test_amount_wider_than_engine_precision(self) -> None:
        value = Decimal("2.952E+33")
        rounded = quantize(value, 2)
        assert not rounded.is_nan()
        assert rounded == value
        assert str(rounded).endswith(".00")

    def test_rounding_carry_adds_a_digit(self) -> None:
        value = Decimal("9" * 34 + ".999")
        assert quantize(value, 2) == Decimal("1" + "0" * 34)


class TestDecimalToStr:
    def test_full_precision(self) -> None:
        assert decimal_to_str(Decimal("1.23456")) == "1.23456"

    def test_places(self) -> None:
        assert decimal_to_str(Decimal("2952"), 2) == "2952.00"

    def test_infinity(self) -> None:
        assert decimal_to_str(INFINITY, 2) == "Infinity"


def test_float_goes_through_repr() -> None:
    assert to_decimal(0.8) == Decimal("0.8")
