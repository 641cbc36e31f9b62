"""Aave-style liquidation math: health factor, liquidation buffer, leverage ceiling."""

from decimal import Decimal

from src.protocol.decimal_math import HUNDRED, INFINITY, ONE, ZERO, engine_context


class LiquidationModel:
    """Liquidation calculations for an asset with a given liquidation threshold."""

    def __init__(self, liquidation_threshold: Decimal) -> None:
        self.liquidation_threshold = liquidation_threshold

    def health_factor(self, collateral: Decimal, debt: Decimal) -> Decimal:
        """Compute health factor.

        HF = (collateral * liquidation_threshold) / debt

        Returns ``Decimal("Infinity")`` when there is no debt.
        """
        with engine_context():
            if debt <= 0:
                return INFINITY
            return (collateral * self.liquidation_threshold) / debt

    def liquidation_price_ratio(self, collateral: Decimal, debt: Decimal) -> Decimal:
        """Fraction of current collateral value at which HF reaches 1.0.

        HF = (collateral * ratio * liq_threshold) / debt = 1.0
        => ratio = debt / (collateral * liq_threshold)

        A ratio of 0.7 means the collateral price can fall 30% before
        liquidation. Returns 0 if the position has no debt.
        """
        with engine_context():
            if debt <= 0:
                return ZERO
            return debt / (collateral * self.liquidation_threshold)

    def max_price_drop_percent(self, collateral: Decimal, debt: Decimal) -> Decimal:
        """Percent the collateral price may fall before liquidation.

        100 without debt; negative once the position is already liquidatable.
        """
        ratio = self.liquidation_price_ratio(collateral, debt)
        with engine_context():
            return (ONE - ratio) * HUNDRED


def max_theoretical_leverage(ltv: Decimal) -> Decimal:
    """Frictionless looping ceiling, 1 / (1 - LTV).

    LTV 0.77 gives 4.35x. An LTV of 1 gives Infinity.
    """
    with engine_context():
        return ONE / (ONE - ltv)


def leverage(collateral: Decimal, initial_amount: Decimal) -> Decimal:
    """Total collateral over the original principal (1 for a non-positive principal)."""
    with engine_context():
        if initial_amount <= 0:
            return ONE
        return collateral / initial_amount
