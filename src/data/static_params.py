"""Static rate provider with a hardcoded Aave V3 snapshot."""

from src.data.constants import DAI, ETH, USDC, USDT, WBTC, WETH
from src.data.interfaces import (
    AssetRiskParameters,
    RateProvider,
    UnknownAssetError,
    bps_to_decimal,
)


def _params(
    symbol: str,
    name: str,
    ltv_bps: int,
    liquidation_threshold_bps: int,
    supply_apy_bps: int,
    borrow_apy_bps: int,
) -> AssetRiskParameters:
    return AssetRiskParameters(
        ltv=bps_to_decimal(ltv_bps),
        liquidation_threshold=bps_to_decimal(liquidation_threshold_bps),
        supply_apy=bps_to_decimal(supply_apy_bps),
        borrow_apy=bps_to_decimal(borrow_apy_bps),
        symbol=symbol,
        name=name,
    )


# --- Representative snapshot used when live data is unavailable ---
# Values in basis points, as the protocol reports them.

_ASSET_PARAMS: dict[str, AssetRiskParameters] = {
    USDC: _params(USDC, "USD Coin", 8000, 8500, 290, 450),
    DAI: _params(DAI, "Dai Stablecoin", 7500, 8000, 350, 480),
    USDT: _params(USDT, "Tether USD", 8000, 8500, 300, 440),
    ETH: _params(ETH, "Ethereum", 8200, 8600, 190, 320),
    WETH: _params(WETH, "Wrapped Ether", 8200, 8600, 190, 320),
    WBTC: _params(WBTC, "Wrapped Bitcoin", 7300, 7800, 110, 250),
}


class StaticRateProvider(RateProvider):
    """Rate provider using a hardcoded Aave V3 mainnet snapshot."""

    def get_asset_params(self, symbol: str) -> AssetRiskParameters:
        try:
            return _ASSET_PARAMS[symbol]
        except KeyError:
            raise UnknownAssetError(symbol) from None

    def list_assets(self) -> list[str]:
        return list(_ASSET_PARAMS)
