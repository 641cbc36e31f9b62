"""Tabular series derived from simulation results, for charts and tables.

Values are converted to floats here: these frames feed plotting and
display code, not further money math.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

import numpy as np
import pandas as pd

from src.data.interfaces import AssetRiskParameters
from src.position.messages import horizon_label
from src.position.yield_projection import compound_interest, months_to_years, simple_interest
from src.protocol.decimal_math import to_decimal
from src.simulation.engine import simulate
from src.simulation.params import CompoundingConfig, Mode, SimulationRequest
from src.simulation.results import SimulationResult

GROWTH_HORIZONS_MONTHS: tuple[int, ...] = (1, 3, 6, 12, 24, 36, 48, 60)


def progression_frame(result: SimulationResult) -> pd.DataFrame:
    """Collateral, debt, equity and leverage after each round.

    Returns:
        DataFrame with columns: round, collateral, debt, net_position,
        leverage, health_factor
    """
    initial = float(result.initial_amount)
    rows = []
    for snap in result.progression:
        collateral = float(snap.cumulative_collateral)
        debt = float(snap.cumulative_debt)
        rows.append(
            {
                "round": snap.round_index,
                "collateral": collateral,
                "debt": debt,
                "net_position": collateral - debt,
                "leverage": collateral / initial if initial > 0 else 1.0,
                "health_factor": float(snap.health_factor_at_round),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["round", "collateral", "debt", "net_position", "leverage", "health_factor"],
    )


def compound_growth_frame(
    result: SimulationResult,
    horizons_months: Sequence[int] = GROWTH_HORIZONS_MONTHS,
    locale: str = "en",
) -> pd.DataFrame:
    """Simple vs compound net interest over long horizons.

    Compounding is always applied here (at the result's periods per year) so
    the two curves can be compared even when auto-reinvest is off.

    Returns:
        DataFrame with columns: months, label, simple_interest,
        compound_interest, difference, total_with_simple, total_with_compound
    """
    compounding = CompoundingConfig(
        enabled=True,
        periods_per_year=result.compounding.periods_per_year,
        frequency=result.compounding.frequency,
        custom_days=result.compounding.custom_days,
    )
    initial = float(result.initial_amount)
    rows = []
    for months in horizons_months:
        years = months_to_years(months)
        simple = float(
            simple_interest(
                result.final_collateral,
                result.final_debt,
                result.supply_apy,
                result.borrow_apy,
                years,
            )
        )
        compound = float(
            compound_interest(
                result.final_collateral,
                result.final_debt,
                result.supply_apy,
                result.borrow_apy,
                compounding,
                years,
            )
        )
        rows.append(
            {
                "months": months,
                "label": horizon_label(months, locale),
                "simple_interest": simple,
                "compound_interest": compound,
                "difference": compound - simple,
                "total_with_simple": initial + simple,
                "total_with_compound": initial + compound,
            }
        )
    return pd.DataFrame(rows)


def monthly_projection_frame(
    result: SimulationResult, months_to_project: int = 60, step: int = 3
) -> pd.DataFrame:
    """Principal plus accumulated interest every ``step`` months.

    Uses compound interest when the result was run with auto-reinvest,
    simple interest otherwise.

    Returns:
        DataFrame with columns: month, principal, interest_accumulated,
        total_value
    """
    initial = float(result.initial_amount)
    months = np.arange(0, months_to_project + 1, step)
    interest = [
        float(
            compound_interest(
                result.final_collateral,
                result.final_debt,
                result.supply_apy,
                result.borrow_apy,
                result.compounding,
                months_to_years(int(m)),
            )
        )
        for m in months
    ]
    return pd.DataFrame(
        {
            "month": months,
            "principal": initial,
            "interest_accumulated": interest,
            "total_value": initial + np.asarray(interest, dtype=float),
        }
    )


def leverage_sweep(
    params: AssetRiskParameters,
    initial_amount: Decimal,
    mode: Mode,
    fractions: np.ndarray | None = None,
    n_points: int = 20,
) -> pd.DataFrame:
    """Outcome of the loop across a grid of borrow fractions.

    Args:
        params: Asset parameters.
        initial_amount: Principal.
        mode: Loop mode applied at every grid point.
        fractions: Borrow fractions to evaluate. Defaults to ``n_points``
            values spaced evenly from 0 to the asset's LTV.
        n_points: Grid size when ``fractions`` is not given.

    Returns:
        DataFrame with columns: borrow_fraction, cycles, leverage,
        health_factor, net_apy
    """
    if fractions is None:
        fractions = np.linspace(0.0, float(params.ltv), n_points)

    rows = []
    for fraction in fractions:
        request = SimulationRequest(
            initial_amount=initial_amount,
            mode=mode,
            borrow_fraction=to_decimal(float(fraction)),
        )
        result = simulate(request, params, horizons_months=())
        rows.append(
            {
                "borrow_fraction": float(fraction),
                "cycles": result.cycles_executed,
                "leverage": float(result.leverage),
                "health_factor": float(result.risk.health_factor),
                "net_apy": float(result.net_apy),
            }
        )
    return pd.DataFrame(rows)
