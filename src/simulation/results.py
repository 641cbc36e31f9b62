"""Result dataclasses for simulation outputs."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from src.protocol.decimal_math import decimal_to_str
from src.simulation.params import CompoundingConfig


class StopReason(str, Enum):
    """Why the cycle loop ended."""

    DUST = "dust"  # Next borrow fell below the dust threshold
    TARGET_REACHED = "target_reached"  # Health factor reached the target
    MAX_ROUNDS = "max_rounds"  # Cycle count or safety cap exhausted


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class CycleSnapshot:
    """State after one deposit -> borrow -> re-deposit round."""

    round_index: int  # 1-based
    cumulative_collateral: Decimal
    cumulative_debt: Decimal
    borrowed_this_round: Decimal
    health_factor_at_round: Decimal  # Infinity when there is no debt


@dataclass(frozen=True)
class CycleTrace:
    """Output of the cycle simulator."""

    progression: tuple[CycleSnapshot, ...]
    final_collateral: Decimal
    final_debt: Decimal
    stop_reason: StopReason

    @property
    def cycles_executed(self) -> int:
        return len(self.progression)


@dataclass(frozen=True)
class RiskAssessment:
    """Liquidation risk of the final position.

    Attributes:
        health_factor: HF of the final position, Infinity without debt.
        liquidation_price_drop_ratio: Fraction of collateral value at which
            HF reaches 1 (0 without debt).
        max_price_drop_percent: Collateral price fall, in percent, tolerable
            before liquidation.
        risk_level: Tier derived from the health factor.
        warnings: Human-readable messages, in display order.
    """

    health_factor: Decimal
    liquidation_price_drop_ratio: Decimal
    max_price_drop_percent: Decimal
    risk_level: RiskLevel
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class TimeProjection:
    """Projected net interest over one horizon."""

    label: str
    months: int
    simple_interest: Decimal
    compound_interest: Decimal
    total_value_compound: Decimal  # Equity after compound interest


@dataclass(frozen=True)
class SimulationResult:
    """Everything a presentation layer needs from one run."""

    initial_amount: Decimal
    cycles_executed: int
    final_collateral: Decimal
    final_debt: Decimal
    leverage: Decimal
    max_theoretical_leverage: Decimal
    supply_apy: Decimal
    borrow_apy: Decimal
    net_apy: Decimal
    net_annual_interest: Decimal
    risk: RiskAssessment
    progression: tuple[CycleSnapshot, ...]
    time_projections: tuple[TimeProjection, ...]
    compounding: CompoundingConfig
    frequency_label: str
    stop_reason: StopReason

    def to_dict(self, places: int | None = None) -> dict[str, Any]:
        """Plain JSON-compatible data; decimals become strings.

        Args:
            places: Round decimals to this many places for display. ``None``
                keeps full precision.
        """

        def num(value: Decimal) -> str:
            return decimal_to_str(value, places)

        risk = self.risk
        return {
            "initial_amount": num(self.initial_amount),
            "cycles_executed": self.cycles_executed,
            "final_collateral": num(self.final_collateral),
            "final_debt": num(self.final_debt),
            "leverage": num(self.leverage),
            "max_theoretical_leverage": num(self.max_theoretical_leverage),
            "supply_apy": num(self.supply_apy),
            "borrow_apy": num(self.borrow_apy),
            "net_apy": num(self.net_apy),
            "net_annual_interest": num(self.net_annual_interest),
            "stop_reason": self.stop_reason.value,
            "risk": {
                "health_factor": num(risk.health_factor),
                "liquidation_price_drop_ratio": num(risk.liquidation_price_drop_ratio),
                "max_price_drop_percent": num(risk.max_price_drop_percent),
                "risk_level": risk.risk_level.value,
                "warnings": list(risk.warnings),
            },
            "progression": [
                {
                    "round": s.round_index,
                    "cumulative_collateral": num(s.cumulative_collateral),
                    "cumulative_debt": num(s.cumulative_debt),
                    "borrowed_this_round": num(s.borrowed_this_round),
                    "health_factor": num(s.health_factor_at_round),
                }
                for s in self.progression
            ],
            "compounding": {
                "enabled": self.compounding.enabled,
                "periods_per_year": self.compounding.periods_per_year,
                "frequency": self.compounding.frequency.value,
                "frequency_label": self.frequency_label,
            },
            "time_projections": [
                {
                    "label": p.label,
                    "months": p.months,
                    "simple_interest": num(p.simple_interest),
                    "compound_interest": num(p.compound_interest),
                    "total_value_compound": num(p.total_value_compound),
                }
                for p in self.time_projections
            ],
        }
