"""Recursive deposit -> borrow -> re-deposit loop.

Each round borrows ``borrow_fraction`` of the collateral added in the
previous round and immediately re-supplies it:

    borrow_i     = carry_{i-1} * borrow_fraction
    collateral_i = collateral_{i-1} + borrow_i
    debt_i       = debt_{i-1} + borrow_i
    carry_i      = borrow_i              (carry_0 = initial amount)

Only the newest tranche seeds the next borrow, so the position converges
towards ``1 / (1 - borrow_fraction)`` leverage. The loop stops on a dust
round, on reaching a target health factor, or after a bounded number of
rounds.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from src.protocol.decimal_math import ZERO, engine_context
from src.protocol.liquidation import LiquidationModel
from src.simulation.params import (
    DUST_ROUND_FRACTION,
    HEALTH_FACTOR_MODE_SAFETY_CAP,
    FixedCycles,
    Mode,
    TargetHealthFactor,
)
from src.simulation.results import CycleSnapshot, CycleTrace, StopReason

logger = logging.getLogger(__name__)


def max_rounds_for(mode: Mode) -> int:
    """Loop bound: the cycle count, or the safety cap in health-factor mode."""
    if isinstance(mode, FixedCycles):
        return mode.count
    return HEALTH_FACTOR_MODE_SAFETY_CAP


def run_cycles(
    initial_amount: Decimal,
    liquidation_threshold: Decimal,
    borrow_fraction: Decimal,
    mode: Mode,
) -> CycleTrace:
    """Run the looping strategy and record one snapshot per executed round.

    Args:
        initial_amount: Principal deposited before the first borrow.
        liquidation_threshold: Asset liquidation threshold used for HF.
        borrow_fraction: Share of the previous round's new collateral to
            borrow each round.
        mode: ``FixedCycles`` or ``TargetHealthFactor``.

    Returns:
        CycleTrace with the ordered progression and final totals. Exhausting
        the round bound is a normal outcome, not an error.
    """
    target: Decimal | None = None
    if isinstance(mode, TargetHealthFactor):
        target = mode.health_factor
    max_rounds = max_rounds_for(mode)
    model = LiquidationModel(liquidation_threshold)

    with engine_context():
        dust_threshold = initial_amount * DUST_ROUND_FRACTION
        total_collateral = initial_amount
        total_debt = ZERO
        carry = initial_amount
        progression: list[CycleSnapshot] = []
        stop_reason = StopReason.MAX_ROUNDS

        for round_index in range(1, max_rounds + 1):
            borrow_amount = carry * borrow_fraction

            if borrow_amount < dust_threshold:
                stop_reason = StopReason.DUST
                break

            total_debt += borrow_amount
            total_collateral += borrow_amount
            current_hf = model.health_factor(total_collateral, total_debt)

            progression.append(
                CycleSnapshot(
                    round_index=round_index,
                    cumulative_collateral=total_collateral,
                    cumulative_debt=total_debt,
                    borrowed_this_round=borrow_amount,
                    health_factor_at_round=current_hf,
                )
            )

            if target is not None and current_hf <= target:
                stop_reason = StopReason.TARGET_REACHED
                break

            carry = borrow_amount

    logger.debug(
        "Cycle loop stopped after %d round(s): %s",
        len(progression),
        stop_reason.value,
    )
    return CycleTrace(
        progression=tuple(progression),
        final_collateral=total_collateral,
        final_debt=total_debt,
        stop_reason=stop_reason,
    )
