"""Recursive lending simulation: cycles -> risk and yield -> result.

``simulate`` is a pure function of its inputs. It never raises for
numeric input: zero debt gives an infinite health factor, invalid
arithmetic propagates as NaN, and the loop is always bounded.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.data.interfaces import AssetRiskParameters, RateProvider
from src.position.messages import frequency_label
from src.position.risk import evaluate_risk
from src.position.yield_projection import (
    DEFAULT_HORIZONS_MONTHS,
    net_annual_interest,
    net_apy,
    project_yield,
)
from src.protocol.decimal_math import engine_context
from src.protocol.liquidation import leverage, max_theoretical_leverage
from src.simulation.cycles import run_cycles
from src.simulation.params import SimulationRequest
from src.simulation.results import SimulationResult

logger = logging.getLogger(__name__)


def simulate(
    request: SimulationRequest,
    params: AssetRiskParameters,
    horizons_months: Sequence[int] = DEFAULT_HORIZONS_MONTHS,
) -> SimulationResult:
    """Run one recursive lending simulation.

    Args:
        request: Pre-validated request (see ``validate_request``).
        params: Risk parameters and rates for the asset being looped.
        horizons_months: Projection horizons in months.

    Returns:
        SimulationResult packaging the cycle trace, risk assessment and
        yield projections.
    """
    with engine_context():
        misconfigured = not params.liquidation_threshold > params.ltv
    if misconfigured:
        logger.warning(
            "Liquidation threshold %s is not above LTV %s for %s; risk output may be meaningless",
            params.liquidation_threshold,
            params.ltv,
            params.symbol or "asset",
        )

    trace = run_cycles(
        request.initial_amount,
        params.liquidation_threshold,
        request.borrow_fraction,
        request.mode,
    )
    collateral = trace.final_collateral
    debt = trace.final_debt

    position_leverage = leverage(collateral, request.initial_amount)
    max_leverage = max_theoretical_leverage(params.ltv)

    risk = evaluate_risk(
        collateral,
        debt,
        params.liquidation_threshold,
        max_leverage,
        request.initial_amount,
        locale=request.locale,
    )
    projections = project_yield(
        collateral,
        debt,
        params.supply_apy,
        params.borrow_apy,
        request.compounding,
        horizons_months=horizons_months,
        locale=request.locale,
    )

    compounding = request.compounding
    return SimulationResult(
        initial_amount=request.initial_amount,
        cycles_executed=trace.cycles_executed,
        final_collateral=collateral,
        final_debt=debt,
        leverage=position_leverage,
        max_theoretical_leverage=max_leverage,
        supply_apy=params.supply_apy,
        borrow_apy=params.borrow_apy,
        net_apy=net_apy(params.supply_apy, params.borrow_apy, position_leverage),
        net_annual_interest=net_annual_interest(
            collateral, debt, params.supply_apy, params.borrow_apy
        ),
        risk=risk,
        progression=trace.progression,
        time_projections=projections,
        compounding=compounding,
        frequency_label=frequency_label(
            compounding.frequency, compounding.custom_days, request.locale
        ),
        stop_reason=trace.stop_reason,
    )


def simulate_asset(
    request: SimulationRequest,
    symbol: str,
    provider: RateProvider,
    horizons_months: Sequence[int] = DEFAULT_HORIZONS_MONTHS,
) -> SimulationResult:
    """Resolve ``symbol`` through ``provider`` and simulate it.

    Raises:
        UnknownAssetError: if the provider does not know the symbol.
    """
    params = provider.get_asset_params(symbol)
    return simulate(request, params, horizons_months=horizons_months)
