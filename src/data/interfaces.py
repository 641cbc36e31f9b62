"""Abstract rate provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from src.data.constants import BPS


@dataclass(frozen=True)
class AssetRiskParameters:
    """Per-asset risk and rate parameters consumed by the simulator.

    All values are decimal ratios (e.g. ``ltv=Decimal("0.80")`` is 80%).
    ``liquidation_threshold > ltv`` is expected but not enforced here.
    """

    ltv: Decimal
    liquidation_threshold: Decimal
    supply_apy: Decimal  # May be negative (incentivised supply)
    borrow_apy: Decimal  # May be negative (borrow incentives)
    symbol: str = ""
    name: str = ""


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating user-supplied input."""

    is_valid: bool
    errors: list[str]


class UnknownAssetError(KeyError):
    """Raised when a provider has no parameters for a symbol."""


class RateProvider(ABC):
    """Abstract interface for per-asset lending parameters."""

    @abstractmethod
    def get_asset_params(self, symbol: str) -> AssetRiskParameters:
        """Get risk parameters and rates for an asset.

        Raises:
            UnknownAssetError: if the symbol is not known to this provider.
        """

    @abstractmethod
    def list_assets(self) -> list[str]:
        """Symbols this provider can serve, in display order."""


def bps_to_decimal(bps: int) -> Decimal:
    """Convert basis points (1e4 scale) to a decimal fraction."""
    return Decimal(bps) / BPS
