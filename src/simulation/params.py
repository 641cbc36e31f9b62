"""Inputs for a recursive lending simulation run.

The loop mode is a small sum type: either a fixed number of cycles or a
target health factor at which looping stops. Range checks on these inputs
belong to the caller (``validate_request``); the engine itself assumes
validated input and only bounds its loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from src.data.interfaces import ValidationResult

MIN_CYCLES = 1
MAX_CYCLES = 10
MIN_TARGET_HEALTH_FACTOR = Decimal("1.05")

# Health-factor mode has no a-priori round bound; never loop past this.
HEALTH_FACTOR_MODE_SAFETY_CAP = 50

# A round whose borrow is below this fraction of the initial amount is dust.
DUST_ROUND_FRACTION = Decimal("0.01")

DEFAULT_CUSTOM_HARVEST_DAYS = 30
SUPPORTED_LOCALES = ("en", "fr")


@dataclass(frozen=True)
class FixedCycles:
    """Run exactly ``count`` borrow/re-deposit cycles (unless a round is dust)."""

    count: int


@dataclass(frozen=True)
class TargetHealthFactor:
    """Loop until the health factor falls to ``health_factor`` or below."""

    health_factor: Decimal


Mode = FixedCycles | TargetHealthFactor


class HarvestFrequency(str, Enum):
    """How often accrued interest is harvested and re-supplied."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    CUSTOM = "custom"


_PERIODS_PER_YEAR = {
    HarvestFrequency.DAILY: 365,
    HarvestFrequency.WEEKLY: 52,
    HarvestFrequency.MONTHLY: 12,
    HarvestFrequency.QUARTERLY: 4,
}


def periods_per_year(
    frequency: HarvestFrequency, custom_days: int = DEFAULT_CUSTOM_HARVEST_DAYS
) -> int:
    """Compounding periods per year for a harvest frequency.

    Custom frequencies give ``floor(365 / custom_days)``, which is 0 when
    harvesting less than once a year.
    """
    if frequency is HarvestFrequency.CUSTOM:
        if custom_days < 1:
            raise ValueError(f"custom_days must be >= 1, got {custom_days}")
        return 365 // custom_days
    return _PERIODS_PER_YEAR[frequency]


@dataclass(frozen=True)
class CompoundingConfig:
    """Auto-reinvest settings for time projections."""

    enabled: bool = False
    periods_per_year: int = 12
    frequency: HarvestFrequency = HarvestFrequency.MONTHLY
    custom_days: int | None = None

    @classmethod
    def from_frequency(
        cls,
        enabled: bool,
        frequency: HarvestFrequency = HarvestFrequency.MONTHLY,
        custom_days: int = DEFAULT_CUSTOM_HARVEST_DAYS,
    ) -> "CompoundingConfig":
        is_custom = frequency is HarvestFrequency.CUSTOM
        return cls(
            enabled=enabled,
            periods_per_year=periods_per_year(frequency, custom_days),
            frequency=frequency,
            custom_days=custom_days if is_custom else None,
        )


@dataclass(frozen=True)
class SimulationRequest:
    """A single what-if run.

    Attributes:
        initial_amount: Principal deposited before the first borrow.
        mode: ``FixedCycles`` or ``TargetHealthFactor``.
        borrow_fraction: Share of each round's new collateral to borrow.
            Not capped at the asset's LTV here.
        compounding: Auto-reinvest settings for projections.
        locale: Language of warnings and labels ("en" or "fr").
    """

    initial_amount: Decimal
    mode: Mode
    borrow_fraction: Decimal
    compounding: CompoundingConfig = CompoundingConfig()
    locale: str = "en"


class InvalidRequestError(ValueError):
    """Raised by ``ensure_valid_request`` with every failed check."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Invalid simulation request: " + "; ".join(errors))
        self.errors = errors


def validate_request(request: SimulationRequest) -> ValidationResult:
    """Check the ranges the input form enforces before a run."""
    errors: list[str] = []

    if not request.initial_amount.is_finite() or request.initial_amount <= 0:
        errors.append("Initial amount must be a positive number")

    mode = request.mode
    if isinstance(mode, FixedCycles):
        if not MIN_CYCLES <= mode.count <= MAX_CYCLES:
            errors.append(
                f"Number of cycles must be between {MIN_CYCLES} and {MAX_CYCLES}"
            )
    elif isinstance(mode, TargetHealthFactor):
        hf = mode.health_factor
        if not hf.is_finite() or hf < MIN_TARGET_HEALTH_FACTOR:
            errors.append(
                f"Target health factor must be at least {MIN_TARGET_HEALTH_FACTOR}"
            )
    else:
        errors.append(f"Unknown simulation mode: {mode!r}")

    fraction = request.borrow_fraction
    if not fraction.is_finite() or not 0 < fraction <= 1:
        errors.append("Borrow fraction must be greater than 0 and at most 1")

    if request.compounding.enabled and request.compounding.periods_per_year < 1:
        errors.append("Compounding needs at least one period per year")

    if request.locale not in SUPPORTED_LOCALES:
        errors.append(f"Locale must be one of {', '.join(SUPPORTED_LOCALES)}")

    return ValidationResult(is_valid=not errors, errors=errors)


def ensure_valid_request(request: SimulationRequest) -> SimulationRequest:
    """Return ``request`` unchanged, or raise ``InvalidRequestError``."""
    result = validate_request(request)
    if not result.is_valid:
        raise InvalidRequestError(result.errors)
    return request
