"""Factory for creating the appropriate RateProvider."""

from __future__ import annotations

import logging
from typing import Iterable

from src.data.custom_assets import (
    CustomAsset,
    CustomAssetError,
    CustomAssetProvider,
    CustomAssetRegistry,
)
from src.data.interfaces import RateProvider
from src.data.static_params import StaticRateProvider

logger = logging.getLogger(__name__)


def create_provider(
    custom_assets: Iterable[CustomAsset] | None = None,
    base: RateProvider | None = None,
) -> RateProvider:
    """Create a rate provider, layering custom assets over a base snapshot.

    Parameters
    ----------
    custom_assets : Iterable[CustomAsset] | None
        User-defined assets or overrides. Invalid records are skipped with
        a warning rather than failing the whole provider.
    base : RateProvider | None
        Provider for protocol-listed assets. Defaults to
        ``StaticRateProvider``.

    Returns
    -------
    RateProvider
        ``CustomAssetProvider`` when any custom asset was registered,
        otherwise the base provider.
    """
    base = base or StaticRateProvider()
    if not custom_assets:
        return base

    registry = CustomAssetRegistry()
    for asset in custom_assets:
        try:
            registry.add(asset)
        except CustomAssetError as exc:
            logger.warning("Skipping custom asset %r: %s", asset.symbol, exc)

    if not len(registry):
        logger.warning("No valid custom assets supplied; using base provider only")
        return base
    return CustomAssetProvider(base, registry)
