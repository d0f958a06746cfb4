"""Asset, precision and price feed constants."""

from typing import Optional, TypedDict


class NetworkAssets(TypedDict):
    USDC: Optional[str]
    ETH: str
    ETH_USD_FEED: Optional[str]


# Reserved id for the chain's base currency; never a deployed token.
NATIVE_ASSET = "0x0000000000000000000000000000000000000000"

NATIVE_DECIMALS = 18
REFERENCE_DECIMALS = 6  # unit-of-account precision (USDC)
ORACLE_PRICE_DECIMALS = 8  # Chainlink */USD feeds
MAX_ASSET_DECIMALS = 18

HEARTBEAT_SECONDS = 3600

# Applied during multiply-then-divide price conversions.
PRECISION_SCALE = 10**18

ETH_MAINNET_ASSETS: NetworkAssets = {
    "USDC": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    "ETH": NATIVE_ASSET,
    "ETH_USD_FEED": "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419",
}

SEPOLIA_ASSETS: NetworkAssets = {
    "USDC": "0x1c7D4B196Cb0C7B01d743Fbc6116a902379C7238",
    "ETH": NATIVE_ASSET,
    "ETH_USD_FEED": "0x694AA1769357215DE4FAC081bf1f309aDC325306",
}

BASE_ASSETS: NetworkAssets = {
    "USDC": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    "ETH": NATIVE_ASSET,
    "ETH_USD_FEED": "0x71041dddad3595F9CEd3DcCFBe3D1F4b0a16Bb70",
}

DEFAULT_MAINNET_RPC_URL = "https://eth.drpc.org"
DEFAULT_SEPOLIA_RPC_URL = "https://sepolia.drpc.org"
DEFAULT_BASE_RPC_URL = "https://mainnet.base.org"
