"""Asset identifiers and protocol constants."""

from decimal import Decimal

# Asset symbols
USDC = "USDC"
DAI = "DAI"
USDT = "USDT"
ETH = "ETH"
WETH = "WETH"
WBTC = "WBTC"

# Basis points (1e4): Aave's unit for LTV, liquidation threshold and quoted rates
BPS = 10_000

# Custom asset limits
MAX_CUSTOM_ASSETS = 50
MAX_ABS_CUSTOM_APY = Decimal(10)  # +/-1000%
MAX_TOKEN_DECIMALS = 18
