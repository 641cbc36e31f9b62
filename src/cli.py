"""Command-line entry point: run one simulation and print the result as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from decimal import Decimal, InvalidOperation

from src.data.custom_assets import (
    CUSTOM,
    OVERRIDE,
    CustomAsset,
    CustomAssetError,
    validate_custom_asset,
)
from src.data.interfaces import AssetRiskParameters, UnknownAssetError
from src.data.provider_factory import create_provider
from src.data.static_params import StaticRateProvider
from src.simulation.engine import simulate
from src.simulation.params import (
    DEFAULT_CUSTOM_HARVEST_DAYS,
    SUPPORTED_LOCALES,
    CompoundingConfig,
    FixedCycles,
    HarvestFrequency,
    SimulationRequest,
    TargetHealthFactor,
    validate_request,
)

logger = logging.getLogger(__name__)

LOCALE_ENV = "RECURSIVE_LENDING_LOCALE"
LOG_LEVEL_ENV = "RECURSIVE_LENDING_LOG_LEVEL"


def _decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recursive-lending",
        description="Simulate a recursive deposit/borrow/re-deposit strategy.",
    )
    parser.add_argument("asset", help="Asset symbol, e.g. USDC")
    parser.add_argument("amount", type=_decimal, help="Initial deposit")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--cycles", type=int, default=None, help="Fixed number of cycles (1-10)")
    mode.add_argument(
        "--target-hf", type=_decimal, default=None, help="Stop at this health factor (>= 1.05)"
    )
    parser.add_argument(
        "--borrow-fraction",
        type=_decimal,
        default=None,
        help="Share of each round's new collateral to borrow (defaults to the asset LTV)",
    )

    override = parser.add_argument_group("rate overrides")
    override.add_argument("--ltv", type=_decimal)
    override.add_argument("--liquidation-threshold", type=_decimal)
    override.add_argument("--supply-apy", type=_decimal)
    override.add_argument("--borrow-apy", type=_decimal)

    parser.add_argument("--compound", action="store_true", help="Auto-reinvest interest")
    parser.add_argument(
        "--frequency",
        choices=[f.value for f in HarvestFrequency],
        default=HarvestFrequency.MONTHLY.value,
    )
    parser.add_argument("--custom-days", type=int, default=DEFAULT_CUSTOM_HARVEST_DAYS)
    parser.add_argument(
        "--locale",
        choices=SUPPORTED_LOCALES,
        default=os.environ.get(LOCALE_ENV, "en"),
    )
    parser.add_argument(
        "--places", type=int, default=None, help="Round decimals in the output"
    )
    return parser


def _override_from_args(
    args: argparse.Namespace, listed: AssetRiskParameters | None
) -> CustomAsset | None:
    fields = (args.ltv, args.liquidation_threshold, args.supply_apy, args.borrow_apy)
    if all(value is None for value in fields):
        return None

    def pick(value: Decimal | None, attr: str) -> Decimal | None:
        if value is None and listed is not None:
            return getattr(listed, attr)
        return value

    return CustomAsset(
        symbol=args.asset,
        name=listed.name if listed and listed.name else args.asset,
        kind=OVERRIDE if listed is not None else CUSTOM,
        ltv=pick(args.ltv, "ltv"),
        liquidation_threshold=pick(args.liquidation_threshold, "liquidation_threshold"),
        supply_apy=args.supply_apy,
        borrow_apy=args.borrow_apy,
    )


def _resolve_params(args: argparse.Namespace) -> AssetRiskParameters:
    """Look up the asset, applying any rate overrides given on the command line.

    Raises:
        UnknownAssetError: for an unlisted symbol without explicit parameters.
        CustomAssetError: if the overridden parameters are invalid.
    """
    base = StaticRateProvider()
    try:
        listed: AssetRiskParameters | None = base.get_asset_params(args.asset)
    except UnknownAssetError:
        listed = None

    override = _override_from_args(args, listed)
    if override is None:
        return base.get_asset_params(args.asset)

    validation = validate_custom_asset(override)
    if not validation.is_valid:
        raise CustomAssetError("Invalid rate override", validation.errors)
    provider = create_provider(custom_assets=[override], base=base)
    return provider.get_asset_params(args.asset)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        params = _resolve_params(args)
    except UnknownAssetError:
        logger.error("Unknown asset %s", args.asset)
        return 2
    except CustomAssetError as exc:
        for error in exc.errors:
            logger.error("Rate override for %s: %s", args.asset, error)
        return 2

    if args.target_hf is not None:
        mode = TargetHealthFactor(args.target_hf)
    else:
        mode = FixedCycles(args.cycles if args.cycles is not None else 3)

    try:
        compounding = CompoundingConfig.from_frequency(
            args.compound, HarvestFrequency(args.frequency), args.custom_days
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    request = SimulationRequest(
        initial_amount=args.amount,
        mode=mode,
        borrow_fraction=args.borrow_fraction if args.borrow_fraction is not None else params.ltv,
        compounding=compounding,
        locale=args.locale,
    )
    validation = validate_request(request)
    if not validation.is_valid:
        for error in validation.errors:
            logger.error("%s", error)
        return 2

    result = simulate(request, params)
    json.dump(result.to_dict(places=args.places), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
