"""User-defined assets and rate overrides layered over a base provider.

A ``custom`` asset describes a market the base provider does not know; an
``override`` replaces the risk parameters (and optionally the rates) of an
existing symbol, e.g. to model a promotional rate. Records live in memory
only.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable

from src.data.constants import MAX_ABS_CUSTOM_APY, MAX_CUSTOM_ASSETS, MAX_TOKEN_DECIMALS
from src.data.interfaces import (
    AssetRiskParameters,
    RateProvider,
    UnknownAssetError,
    ValidationResult,
)

logger = logging.getLogger(__name__)

CUSTOM = "custom"
OVERRIDE = "override"

_SYMBOL_RE = re.compile(r"^[A-Z0-9]{2,10}$")
_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


@dataclass(frozen=True)
class CustomAsset:
    """A user-supplied asset definition or rate override."""

    symbol: str
    name: str
    ltv: Decimal | str
    liquidation_threshold: Decimal | str
    kind: str = CUSTOM  # "custom" or "override"
    supply_apy: Decimal | str | None = None
    borrow_apy: Decimal | str | None = None
    category: str | None = None
    address: str | None = None
    decimals: int | None = None
    notes: str | None = None
    id: str = ""
    created_at: float = 0.0
    updated_at: float = 0.0


class CustomAssetError(ValueError):
    """Raised when a registry operation is rejected."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def _parse(value: Decimal | str | None) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        parsed = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("NaN")
    return parsed


def _in_range(value: Decimal | None, low: Decimal, high: Decimal) -> bool:
    return value is not None and not value.is_nan() and low <= value <= high


def validate_custom_asset(
    asset: CustomAsset, existing: Iterable[CustomAsset] = ()
) -> ValidationResult:
    """Check a custom asset against the editor's rules.

    Args:
        asset: Record to validate.
        existing: Records already registered; used for the duplicate-symbol
            check (a record never conflicts with itself, matched by id).

    Returns:
        ValidationResult listing every failed rule.
    """
    errors: list[str] = []

    if not asset.symbol:
        errors.append("Symbol is required")
    elif not _SYMBOL_RE.match(asset.symbol):
        errors.append("Symbol must be 2-10 uppercase letters and numbers")
    elif any(a.symbol == asset.symbol and a.id != asset.id for a in existing):
        errors.append(f'Symbol "{asset.symbol}" already exists')

    if not asset.name or len(asset.name.strip()) < 2:
        errors.append("Name must be at least 2 characters")

    zero, one = Decimal(0), Decimal(1)

    ltv = _parse(asset.ltv)
    if ltv is None:
        errors.append("LTV is required")
    elif not _in_range(ltv, zero, one):
        errors.append("LTV must be between 0 and 1 (0-100%)")

    threshold = _parse(asset.liquidation_threshold)
    if threshold is None:
        errors.append("Liquidation Threshold is required")
    elif not _in_range(threshold, zero, one):
        errors.append("Liquidation Threshold must be between 0 and 1 (0-100%)")
    elif threshold <= (ltv if ltv is not None and not ltv.is_nan() else zero):
        errors.append("Liquidation Threshold must be higher than LTV")

    for label, raw in (("Supply APY", asset.supply_apy), ("Borrow APY", asset.borrow_apy)):
        rate = _parse(raw)
        if rate is not None and not _in_range(rate, -MAX_ABS_CUSTOM_APY, MAX_ABS_CUSTOM_APY):
            errors.append(f"{label} must be between -10 and 10 (-1000% to 1000%)")

    if asset.address and not _ADDRESS_RE.match(asset.address):
        errors.append(
            "Invalid Ethereum address format. Must be 0x followed by 40 hex characters"
        )

    if asset.decimals is not None and not 0 <= asset.decimals <= MAX_TOKEN_DECIMALS:
        errors.append(f"Decimals must be between 0 and {MAX_TOKEN_DECIMALS}")

    if asset.kind not in (CUSTOM, OVERRIDE):
        errors.append('Type must be "custom" or "override"')

    return ValidationResult(is_valid=not errors, errors=errors)


class CustomAssetRegistry:
    """In-memory collection of custom assets and overrides."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._assets: dict[str, CustomAsset] = {}

    def add(self, asset: CustomAsset) -> CustomAsset:
        """Validate and register a new asset, assigning id and timestamps."""
        result = validate_custom_asset(asset, self._assets.values())
        if not result.is_valid:
            raise CustomAssetError(
                f"Validation failed: {', '.join(result.errors)}", result.errors
            )
        if len(self._assets) >= MAX_CUSTOM_ASSETS:
            raise CustomAssetError(
                f"Maximum of {MAX_CUSTOM_ASSETS} custom assets reached. "
                "Please delete some assets."
            )

        now = self._clock()
        stored = replace(asset, id=str(uuid.uuid4()), created_at=now, updated_at=now)
        self._assets[stored.id] = stored
        logger.info("Custom asset saved: %s", stored.symbol)
        return stored

    def update(self, asset_id: str, **changes: object) -> CustomAsset:
        """Apply ``changes`` to a registered asset; id and created_at are kept."""
        existing = self._get(asset_id)
        changes.pop("id", None)
        changes.pop("created_at", None)
        changes.pop("updated_at", None)
        updated = replace(existing, **changes, updated_at=self._clock())

        result = validate_custom_asset(updated, self._assets.values())
        if not result.is_valid:
            raise CustomAssetError(
                f"Validation failed: {', '.join(result.errors)}", result.errors
            )
        self._assets[asset_id] = updated
        logger.info("Custom asset updated: %s", updated.symbol)
        return updated

    def remove(self, asset_id: str) -> None:
        asset = self._get(asset_id)
        del self._assets[asset_id]
        logger.info("Custom asset deleted: %s", asset.symbol)

    def get_by_symbol(self, symbol: str) -> CustomAsset | None:
        return next((a for a in self._assets.values() if a.symbol == symbol), None)

    def all(self) -> list[CustomAsset]:
        """All assets, most recently created first."""
        return sorted(self._assets.values(), key=lambda a: a.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._assets)

    def _get(self, asset_id: str) -> CustomAsset:
        try:
            return self._assets[asset_id]
        except KeyError:
            raise CustomAssetError(f"Custom asset with id {asset_id} not found") from None


class CustomAssetProvider(RateProvider):
    """Serve registry entries first, then fall back to ``base``.

    Overrides keep the base asset's rates when they do not set their own.
    Custom assets without rates default to 0% APY.
    """

    def __init__(self, base: RateProvider, registry: CustomAssetRegistry) -> None:
        self.base = base
        self.registry = registry

    def get_asset_params(self, symbol: str) -> AssetRiskParameters:
        asset = self.registry.get_by_symbol(symbol)
        if asset is None:
            return self.base.get_asset_params(symbol)

        base_params: AssetRiskParameters | None = None
        if asset.kind == OVERRIDE:
            try:
                base_params = self.base.get_asset_params(symbol)
            except UnknownAssetError:
                logger.warning(
                    "Override for %s has no base asset; treating it as custom", symbol
                )

        supply = _parse(asset.supply_apy)
        borrow = _parse(asset.borrow_apy)
        if supply is None:
            supply = base_params.supply_apy if base_params else Decimal(0)
        if borrow is None:
            borrow = base_params.borrow_apy if base_params else Decimal(0)

        return AssetRiskParameters(
            ltv=Decimal(asset.ltv),
            liquidation_threshold=Decimal(asset.liquidation_threshold),
            supply_apy=supply,
            borrow_apy=borrow,
            symbol=asset.symbol,
            name=asset.name,
        )

    def list_assets(self) -> list[str]:
        symbols = self.base.list_assets()
        extra = [a.symbol for a in self.registry.all() if a.symbol not in symbols]
        return symbols + extra
