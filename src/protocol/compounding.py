"""Simple and compound interest on a single supply or borrow leg.

Compound interest follows A = P * (1 + r/n)^(n*t) where P is the principal,
r the annual rate, n the compounding periods per year and t the time in
years. Only the interest (A - P) is returned.
"""

from decimal import Decimal

from src.protocol.decimal_math import ONE, engine_context


def simple_leg(principal: Decimal, annual_rate: Decimal, years: Decimal) -> Decimal:
    """Linear interest on ``principal`` over ``years``."""
    with engine_context():
        return principal * annual_rate * years


class CompoundingModel:
    """Periodic compounding at a fixed number of periods per year.

    Zero periods per year means interest is never reinvested, so the model
    falls back to simple interest.
    """

    def __init__(self, periods_per_year: int) -> None:
        self.periods_per_year = periods_per_year

    def growth_factor(self, annual_rate: Decimal, years: Decimal) -> Decimal:
        """(1 + r/n)^(n*t).

        A base that cannot be raised to a fractional power (rate below -100%
        per period) gives NaN rather than raising.
        """
        with engine_context():
            n = Decimal(self.periods_per_year)
            return (ONE + annual_rate / n) ** (n * years)

    def interest(self, principal: Decimal, annual_rate: Decimal, years: Decimal) -> Decimal:
        """Interest earned (or owed) on one leg.

        Args:
            principal: Collateral or debt amount.
            annual_rate: APY as a decimal (may be negative).
            years: Time horizon in years.

        Returns:
            Interest only, i.e. final amount minus principal.
        """
        if self.periods_per_year == 0:
            return simple_leg(principal, annual_rate, years)

        growth = self.growth_factor(annual_rate, years)
        with engine_context():
            return principal * (growth - ONE)
