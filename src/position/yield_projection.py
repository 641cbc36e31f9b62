"""Net APY and interest projections for a looped position."""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from src.position.messages import horizon_label
from src.protocol.compounding import CompoundingModel
from src.protocol.decimal_math import ONE, engine_context
from src.simulation.params import CompoundingConfig
from src.simulation.results import TimeProjection

DEFAULT_HORIZONS_MONTHS: tuple[int, ...] = (1, 3, 6, 12, 24)


def net_apy(supply_apy: Decimal, borrow_apy: Decimal, leverage: Decimal) -> Decimal:
    """Leverage-adjusted APY on the original principal.

    net = supply * L - borrow * (L - 1)

    Supply yield accrues on the whole collateral; borrow cost only on the
    debt-funded part ``L - 1``.
    """
    with engine_context():
        return supply_apy * leverage - borrow_apy * (leverage - ONE)


def net_annual_interest(
    collateral: Decimal, debt: Decimal, supply_apy: Decimal, borrow_apy: Decimal
) -> Decimal:
    """Supply interest minus borrow interest over one year, without compounding."""
    with engine_context():
        return collateral * supply_apy - debt * borrow_apy


def simple_interest(
    collateral: Decimal,
    debt: Decimal,
    supply_apy: Decimal,
    borrow_apy: Decimal,
    years: Decimal,
) -> Decimal:
    """Linear extrapolation of the annual net interest."""
    with engine_context():
        return net_annual_interest(collateral, debt, supply_apy, borrow_apy) * years


def compound_interest(
    collateral: Decimal,
    debt: Decimal,
    supply_apy: Decimal,
    borrow_apy: Decimal,
    compounding: CompoundingConfig,
    years: Decimal,
) -> Decimal:
    """Net interest with the supply and borrow legs compounded separately.

    With compounding disabled this equals ``simple_interest``.
    """
    if not compounding.enabled:
        return simple_interest(collateral, debt, supply_apy, borrow_apy, years)

    model = CompoundingModel(compounding.periods_per_year)
    supply_leg = model.interest(collateral, supply_apy, years)
    borrow_leg = model.interest(debt, borrow_apy, years)
    with engine_context():
        return supply_leg - borrow_leg


def months_to_years(months: int) -> Decimal:
    with engine_context():
        return Decimal(months) / 12


def project_yield(
    collateral: Decimal,
    debt: Decimal,
    supply_apy: Decimal,
    borrow_apy: Decimal,
    compounding: CompoundingConfig,
    horizons_months: Sequence[int] = DEFAULT_HORIZONS_MONTHS,
    locale: str = "en",
) -> tuple[TimeProjection, ...]:
    """Simple vs compound net interest over each horizon.

    Args:
        collateral: Final collateral.
        debt: Final debt.
        supply_apy: Annual supply rate.
        borrow_apy: Annual borrow rate.
        compounding: Auto-reinvest settings.
        horizons_months: Horizons to project, in months.
        locale: Language for horizon labels.

    Returns:
        One TimeProjection per horizon, in the given order.
    """
    projections = []
    for months in horizons_months:
        years = months_to_years(months)
        simple = simple_interest(collateral, debt, supply_apy, borrow_apy, years)
        compound = compound_interest(
            collateral, debt, supply_apy, borrow_apy, compounding, years
        )
        with engine_context():
            total_value = collateral + compound - debt
        projections.append(
            TimeProjection(
                label=horizon_label(months, locale),
                months=months,
                simple_interest=simple,
                compound_interest=compound,
                total_value_compound=total_value,
            )
        )
    return tuple(projections)
