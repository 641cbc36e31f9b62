"""Liquidation risk of a looped position: HF, price buffer, risk tier, warnings."""

from __future__ import annotations

from decimal import Decimal

from src.position.messages import message
from src.protocol.decimal_math import engine_context, quantize
from src.protocol.liquidation import LiquidationModel, leverage
from src.simulation.results import RiskAssessment, RiskLevel

# Health factor tiers, checked in order; first match wins.
CRITICAL_HEALTH_FACTOR = Decimal("1.1")
HIGH_HEALTH_FACTOR = Decimal("1.3")
MEDIUM_HEALTH_FACTOR = Decimal("1.5")
VERY_SAFE_HEALTH_FACTOR = Decimal("2.0")

# Warn once leverage exceeds this share of 1 / (1 - LTV).
LEVERAGE_WARNING_RATIO = Decimal("0.95")


def classify_health_factor(hf: Decimal) -> RiskLevel:
    """Map a health factor onto a risk tier (NaN and Infinity are LOW)."""
    with engine_context():
        if hf < CRITICAL_HEALTH_FACTOR:
            return RiskLevel.CRITICAL
        if hf < HIGH_HEALTH_FACTOR:
            return RiskLevel.HIGH
        if hf < MEDIUM_HEALTH_FACTOR:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW


def evaluate_risk(
    total_collateral: Decimal,
    total_debt: Decimal,
    liquidation_threshold: Decimal,
    max_theoretical_leverage: Decimal,
    initial_amount: Decimal,
    locale: str = "en",
) -> RiskAssessment:
    """Assess the final position of a run.

    Args:
        total_collateral: Final collateral after all rounds.
        total_debt: Final debt after all rounds.
        liquidation_threshold: Asset liquidation threshold.
        max_theoretical_leverage: 1 / (1 - LTV) for the asset.
        initial_amount: Original principal.
        locale: Language for warnings.

    Returns:
        RiskAssessment. A position without debt is LOW risk with an
        infinite health factor and no warnings.
    """
    model = LiquidationModel(liquidation_threshold)
    hf = model.health_factor(total_collateral, total_debt)
    price_ratio = model.liquidation_price_ratio(total_collateral, total_debt)
    drop_percent = model.max_price_drop_percent(total_collateral, total_debt)
    current_leverage = leverage(total_collateral, initial_amount)
    risk_level = classify_health_factor(hf)

    with engine_context():
        has_debt = total_debt > 0
    if not has_debt:
        return RiskAssessment(
            health_factor=hf,
            liquidation_price_drop_ratio=price_ratio,
            max_price_drop_percent=drop_percent,
            risk_level=risk_level,
            warnings=(),
        )

    warnings: list[str] = []
    drop = _fmt(drop_percent, 1)

    with engine_context():
        if current_leverage > max_theoretical_leverage * LEVERAGE_WARNING_RATIO:
            warnings.append(
                message(
                    "leverage_near_max",
                    locale,
                    current=_fmt(current_leverage, 2),
                    maximum=_fmt(max_theoretical_leverage, 2),
                )
            )
            warnings.append(message("leverage_near_max_detail", locale))

        if risk_level is RiskLevel.CRITICAL:
            warnings.append(message("critical", locale))
            warnings.append(message("critical_detail", locale, drop=drop))
        else:
            if risk_level is RiskLevel.HIGH:
                key = "high"
            elif risk_level is RiskLevel.MEDIUM:
                key = "medium"
            elif hf < VERY_SAFE_HEALTH_FACTOR:
                key = "low"
            else:
                key = "very_low"
            warnings.append(message(key, locale))
            warnings.append(message("margin", locale, drop=drop))

    return RiskAssessment(
        health_factor=hf,
        liquidation_price_drop_ratio=price_ratio,
        max_price_drop_percent=drop_percent,
        risk_level=risk_level,
        warnings=tuple(warnings),
    )


def _fmt(value: Decimal, places: int) -> str:
    return str(quantize(value, places))
