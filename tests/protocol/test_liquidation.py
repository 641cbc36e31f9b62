"""Tests for the liquidation model."""

from decimal import Decimal

import pytest

from src.protocol.liquidation import LiquidationModel, leverage, max_theoretical_leverage

LT = Decimal("0.83")


@pytest.fixture
def model() -> LiquidationModel:
    return LiquidationModel(LT)


@pytest.fixture
def zero_threshold_model() -> LiquidationModel:
    return LiquidationModel(Decimal(0))


class TestHealthFactor:
    def test_healthy_position(self, model: LiquidationModel) -> None:
        hf = model.health_factor(Decimal(100), Decimal(50))
        # (100 * 0.83) / 50
        assert hf == Decimal("1.66")
        assert hf > 1

    def test_exact_liquidation(self, model: LiquidationModel) -> None:
        # collateral * 0.83 / debt = 1.0 => debt = collateral * 0.83
        assert model.health_factor(Decimal(100), Decimal(83)) == 1

    def test_underwater_position(self, model: LiquidationModel) -> None:
        assert model.health_factor(Decimal(100), Decimal(90)) < 1

    def test_no_debt_is_infinite(self, model: LiquidationModel) -> None:
        hf = model.health_factor(Decimal(100), Decimal(0))
        assert hf.is_infinite()
        assert hf > 0

    def test_zero_threshold_does_not_raise(
        self, zero_threshold_model: LiquidationModel
    ) -> None:
        assert zero_threshold_model.health_factor(Decimal(100), Decimal(50)) == 0

    def test_nan_debt_propagates(self, model: LiquidationModel) -> None:
        assert model.health_factor(Decimal(100), Decimal("NaN")).is_nan()


class TestLiquidationPriceRatio:
    def test_ratio(self, model: LiquidationModel) -> None:
        ratio = model.liquidation_price_ratio(Decimal(100), Decimal(50))
        assert float(ratio) == pytest.approx(50 / 83)

    def test_ratio_is_inverse_of_health_factor(self) -> None:
        model = LiquidationModel(Decimal("0.85"))
        collateral, debt = Decimal(2952), Decimal(1952)
        ratio = model.liquidation_price_ratio(collateral, debt)
        hf = model.health_factor(collateral, debt)
        assert float(ratio * hf) == pytest.approx(1.0)

    def test_no_debt(self, model: LiquidationModel) -> None:
        assert model.liquidation_price_ratio(Decimal(100), Decimal(0)) == 0

    def test_zero_threshold_is_infinite(self, zero_threshold_model: LiquidationModel) -> None:
        ratio = zero_threshold_model.liquidation_price_ratio(Decimal(100), Decimal(50))
        assert ratio.is_infinite()


class TestMaxPriceDrop:
    def test_thirty_percent(self) -> None:
        # ratio = 70 / (125 * 0.8) = 0.7
        model = LiquidationModel(Decimal("0.8"))
        assert model.max_price_drop_percent(Decimal(125), Decimal(70)) == 30

    def test_no_debt_full_buffer(self, model: LiquidationModel) -> None:
        assert model.max_price_drop_percent(Decimal(100), Decimal(0)) == 100

    def test_already_liquidatable_is_negative(self, model: LiquidationModel) -> None:
        assert model.max_price_drop_percent(Decimal(100), Decimal(90)) < 0


class TestLeverage:
    def test_max_theoretical_leverage(self) -> None:
        assert max_theoretical_leverage(Decimal("0.8")) == 5

    def test_max_theoretical_leverage_77(self) -> None:
        assert float(max_theoretical_leverage(Decimal("0.77"))) == pytest.approx(4.3478, rel=1e-4)

    def test_full_ltv_is_infinite(self) -> None:
        assert max_theoretical_leverage(Decimal(1)).is_infinite()

    def test_leverage(self) -> None:
        assert leverage(Decimal(2952), Decimal(1000)) == Decimal("2.952")

    def test_leverage_without_principal(self) -> None:
        assert leverage(Decimal(500), Decimal(0)) == 1
