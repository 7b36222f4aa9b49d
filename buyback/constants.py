"""Protocol constants for the buyback hook.

Centralizes well-known addresses, TWAP bounds and Uniswap V3 limits.
"""

from buyback.models.types import is_valid_address


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Slippage tolerance is expressed out of this denominator (basis points)
SLIPPAGE_DENOMINATOR = 10_000

# TWAP slippage tolerance bounds (1% - 90%)
MIN_TWAP_SLIPPAGE_TOLERANCE = 100
MAX_TWAP_SLIPPAGE_TOLERANCE = 9_000

# TWAP window bounds in seconds (2 minutes - 2 days)
MIN_TWAP_WINDOW = 2 * 60
MAX_TWAP_WINDOW = 2 * 24 * 60 * 60

# Uniswap V3 sqrt price limits (TickMath.MIN_SQRT_RATIO / MAX_SQRT_RATIO)
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

# Mainnet deployment (lowercase for consistency)
UNISWAP_V3_FACTORY = _validate_address(
    "UNISWAP_V3_FACTORY", "0x1f98431c8ad98523631ae4a59f267346ea31f984"
)
POOL_INIT_CODE_HASH = "0xe34f199b19b2b4f47f68442619d555527d244f78a3297ea89325f843f87b8b54"
WETH = _validate_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2")

# Sentinel used by payment terminals for the chain's native currency
NATIVE_TOKEN = _validate_address("NATIVE_TOKEN", "0x000000000000000000000000000000000000eeee")

# Tag identifying the buyback block inside multiplexed payment metadata
BUYBACK_METADATA_TAG = bytes.fromhex("62757962")  # b"buyb"

__all__ = [
    "SLIPPAGE_DENOMINATOR",
    "MIN_TWAP_SLIPPAGE_TOLERANCE",
    "MAX_TWAP_SLIPPAGE_TOLERANCE",
    "MIN_TWAP_WINDOW",
    "MAX_TWAP_WINDOW",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "UNISWAP_V3_FACTORY",
    "POOL_INIT_CODE_HASH",
    "WETH",
    "NATIVE_TOKEN",
    "BUYBACK_METADATA_TAG",
]
