"""Tests for custom asset validation, the in-memory registry and the layered provider."""

from __future__ import annotations

import itertools
import logging
from decimal import Decimal

import pytest

from src.data.constants import MAX_CUSTOM_ASSETS, USDC
from src.data.custom_assets import (
    CUSTOM,
    OVERRIDE,
    CustomAsset,
    CustomAssetError,
    CustomAssetProvider,
    CustomAssetRegistry,
    validate_custom_asset,
)
from src.data.interfaces import UnknownAssetError
from src.data.static_params import StaticRateProvider


def _asset(**overrides) -> CustomAsset:
    values = dict(symbol="MYTKN", name="My Token", ltv="0.70", liquidation_threshold="0.75")
    values.update(overrides)
    return CustomAsset(**values)


def _registry() -> CustomAssetRegistry:
    ticks = itertools.count(1000)
    return CustomAssetRegistry(clock=lambda: float(next(ticks)))


# ======================================================================
# 1. Validation
# ======================================================================


class TestValidateCustomAsset:
    def test_valid_minimal(self):
        result = validate_custom_asset(_asset())
        assert result.is_valid
        assert result.errors == []

    def test_valid_full(self):
        asset = _asset(
            supply_apy="0.04",
            borrow_apy="-0.01",
            address="0x" + "aB" * 20,
            decimals=18,
            category="stablecoin",
        )
        assert validate_custom_asset(asset).is_valid

    @pytest.mark.parametrize("symbol", ["A", "lower", "TOOLONGSYMBOL", "MY-TKN"])
    def test_symbol_format(self, symbol):
        result = validate_custom_asset(_asset(symbol=symbol))
        assert result.errors == ["Symbol must be 2-10 uppercase letters and numbers"]

    def test_symbol_required(self):
        assert "Symbol is required" in validate_custom_asset(_asset(symbol="")).errors

    def test_name_too_short(self):
        assert not validate_custom_asset(_asset(name=" x ")).is_valid

    def test_ltv_out_of_range(self):
        result = validate_custom_asset(_asset(ltv="1.2", liquidation_threshold="0.9"))
        assert "LTV must be between 0 and 1 (0-100%)" in result.errors

    def test_threshold_must_exceed_ltv(self):
        result = validate_custom_asset(_asset(ltv="0.8", liquidation_threshold="0.8"))
        assert result.errors == ["Liquidation Threshold must be higher than LTV"]

    def test_missing_ltv(self):
        assert "LTV is required" in validate_custom_asset(_asset(ltv="")).errors

    def test_non_numeric_ltv(self):
        assert not validate_custom_asset(_asset(ltv="abc")).is_valid

    def test_apy_bounds(self):
        assert validate_custom_asset(_asset(supply_apy="10")).is_valid
        result = validate_custom_asset(_asset(borrow_apy="-10.5"))
        assert result.errors == ["Borrow APY must be between -10 and 10 (-1000% to 1000%)"]

    def test_bad_address(self):
        assert not validate_custom_asset(_asset(address="0x1234")).is_valid

    def test_decimals_bounds(self):
        assert not validate_custom_asset(_asset(decimals=19)).is_valid
        assert validate_custom_asset(_asset(decimals=0)).is_valid

    def test_unknown_kind(self):
        assert not validate_custom_asset(_asset(kind="other")).is_valid

    def test_duplicate_symbol(self):
        existing = [_asset(id="a")]
        result = validate_custom_asset(_asset(id="b"), existing)
        assert result.errors == ['Symbol "MYTKN" already exists']

    def test_same_record_is_not_a_duplicate(self):
        existing = [_asset(id="a")]
        assert validate_custom_asset(_asset(id="a"), existing).is_valid


# ======================================================================
# 2. Registry
# ======================================================================


class TestCustomAssetRegistry:
    def test_add_assigns_id_and_timestamps(self):
        registry = _registry()
        stored = registry.add(_asset())
        assert stored.id
        assert stored.created_at == stored.updated_at == 1000.0
        assert len(registry) == 1
        assert registry.get_by_symbol("MYTKN") == stored

    def test_add_invalid_raises_with_errors(self):
        with pytest.raises(CustomAssetError) as excinfo:
            _registry().add(_asset(ltv="0.9", liquidation_threshold="0.5"))
        assert excinfo.value.errors == ["Liquidation Threshold must be higher than LTV"]

    def test_add_duplicate_rejected(self):
        registry = _registry()
        registry.add(_asset())
        with pytest.raises(CustomAssetError):
            registry.add(_asset(name="Another"))

    def test_limit(self):
        registry = _registry()
        for i in range(MAX_CUSTOM_ASSETS):
            registry.add(_asset(symbol=f"TK{i}"))
        with pytest.raises(CustomAssetError, match="Maximum of 50"):
            registry.add(_asset(symbol="ONEMORE"))

    def test_update_keeps_identity(self):
        registry = _registry()
        stored = registry.add(_asset())
        updated = registry.update(stored.id, supply_apy="0.05", id="hijack", created_at=0.0)
        assert updated.id == stored.id
        assert updated.created_at == stored.created_at
        assert updated.updated_at > stored.updated_at
        assert updated.supply_apy == "0.05"

    def test_update_validates(self):
        registry = _registry()
        stored = registry.add(_asset())
        with pytest.raises(CustomAssetError):
            registry.update(stored.id, ltv="0.99")
        assert registry.get_by_symbol("MYTKN") == stored

    def test_update_unknown_id(self):
        with pytest.raises(CustomAssetError, match="not found"):
            _registry().update("missing", name="X")

    def test_remove(self, caplog):
        registry = _registry()
        stored = registry.add(_asset())
        with caplog.at_level(logging.INFO, logger="src.data.custom_assets"):
            registry.remove(stored.id)
        assert len(registry) == 0
        assert registry.get_by_symbol("MYTKN") is None
        assert "Custom asset deleted: MYTKN" in caplog.text

    def test_all_newest_first(self):
        registry = _registry()
        registry.add(_asset(symbol="FIRST"))
        registry.add(_asset(symbol="SECOND"))
        assert [a.symbol for a in registry.all()] == ["SECOND", "FIRST"]


# ======================================================================
# 3. Layered provider
# ======================================================================


class TestCustomAssetProvider:
    def setup_method(self):
        self.base = StaticRateProvider()
        self.registry = _registry()
        self.provider = CustomAssetProvider(self.base, self.registry)

    def test_falls_back_to_base(self):
        assert self.provider.get_asset_params(USDC) == self.base.get_asset_params(USDC)

    def test_unknown_symbol(self):
        with pytest.raises(UnknownAssetError):
            self.provider.get_asset_params("NOPE")

    def test_custom_asset_defaults_to_zero_rates(self):
        self.registry.add(_asset())
        params = self.provider.get_asset_params("MYTKN")
        assert params.ltv == Decimal("0.70")
        assert params.liquidation_threshold == Decimal("0.75")
        assert params.supply_apy == 0
        assert params.borrow_apy == 0
        assert params.name == "My Token"

    def test_override_keeps_base_rates(self):
        self.registry.add(
            _asset(symbol=USDC, name="USD Coin", kind=OVERRIDE, ltv="0.70", liquidation_threshold="0.80")
        )
        params = self.provider.get_asset_params(USDC)
        assert params.ltv == Decimal("0.70")
        assert params.supply_apy == Decimal("0.029")
        assert params.borrow_apy == Decimal("0.045")

    def test_override_replaces_given_rate(self):
        self.registry.add(
            _asset(symbol=USDC, name="USD Coin", kind=OVERRIDE, ltv="0.80",
                   liquidation_threshold="0.85", supply_apy="0.06")
        )
        params = self.provider.get_asset_params(USDC)
        assert params.supply_apy == Decimal("0.06")
        assert params.borrow_apy == Decimal("0.045")

    def test_override_without_base_warns(self, caplog):
        self.registry.add(_asset(kind=OVERRIDE, supply_apy="0.02"))
        with caplog.at_level(logging.WARNING):
            params = self.provider.get_asset_params("MYTKN")
        assert params.supply_apy == Decimal("0.02")
        assert params.borrow_apy == 0
        assert "has no base asset" in caplog.text

    def test_list_assets_appends_new_symbols(self):
        self.registry.add(_asset())
        self.registry.add(_asset(symbol=USDC, kind=OVERRIDE, ltv="0.8", liquidation_threshold="0.85"))
        assets = self.provider.list_assets()
        assert assets[: len(self.base.list_assets())] == self.base.list_assets()
        assert assets.count(USDC) == 1
        assert assets[-1] == "MYTKN"

    def test_kind_constants(self):
        assert _asset().kind == CUSTOM
