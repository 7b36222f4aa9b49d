"""Read-only Uniswap V3 pool access over JSON-RPC.

Backs the QuoteEngine outside of tests: slot0 and observe are plain
eth_calls, and a pool "exists" when there is contract code at its address.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from buyback.errors import PoolError
from buyback.interfaces import Slot0
from buyback.models.types import normalize_address

logger = structlog.get_logger()

# UniswapV3Pool ABI - minimal, just the oracle functions we need
UNISWAP_V3_POOL_ABI = [
    {
        "name": "slot0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "sqrtPriceX96", "type": "uint160"},
            {"name": "tick", "type": "int24"},
            {"name": "observationIndex", "type": "uint16"},
            {"name": "observationCardinality", "type": "uint16"},
            {"name": "observationCardinalityNext", "type": "uint16"},
            {"name": "feeProtocol", "type": "uint8"},
            {"name": "unlocked", "type": "bool"},
        ],
    },
    {
        "name": "observe",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "secondsAgos", "type": "uint32[]"}],
        "outputs": [
            {"name": "tickCumulatives", "type": "int56[]"},
            {"name": "secondsPerLiquidityCumulativeX128s", "type": "uint160[]"},
        ],
    },
]


class Web3Pool:
    """A single pool read through a web3 contract handle."""

    def __init__(self, address: str, contract: object) -> None:
        self._address = normalize_address(address)
        self._contract = contract

    @property
    def address(self) -> str:
        return self._address

    def slot0(self) -> Slot0:
        """Read live pool state via RPC."""
        try:
            result = self._contract.functions.slot0().call()  # type: ignore[attr-defined]
        except Exception as e:
            raise PoolError(f"slot0 call failed for {self._address}: {e}") from e

        # (sqrtPriceX96, tick, observationIndex, observationCardinality,
        #  observationCardinalityNext, feeProtocol, unlocked)
        return Slot0(
            sqrt_price_x96=int(result[0]),
            tick=int(result[1]),
            observation_cardinality=int(result[3]),
            unlocked=bool(result[6]),
        )

    def observe(self, seconds_agos: Sequence[int]) -> list[int]:
        """Read tick cumulatives via RPC."""
        try:
            result = self._contract.functions.observe(list(seconds_agos)).call()  # type: ignore[attr-defined]
        except Exception as e:
            raise PoolError(f"observe call failed for {self._address}: {e}") from e
        return [int(c) for c in result[0]]


class Web3PoolProvider:
    """Resolves pool identifiers to Web3Pool handles.

    This makes actual eth_getCode / eth_call requests.
    """

    def __init__(self, web3_provider: str):
        """Initialize provider.

        Args:
            web3_provider: HTTP RPC URL (e.g., "https://eth.llamarpc.com")
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3PoolProvider. Install with: pip install web3"
            ) from e

        self.w3 = Web3(Web3.HTTPProvider(web3_provider))

    def get_pool(self, pool_id: str) -> Web3Pool | None:
        """Return the pool at `pool_id`, or None if no contract is deployed there."""
        from web3 import Web3

        address = Web3.to_checksum_address(pool_id)
        try:
            code = self.w3.eth.get_code(address)
        except Exception as e:
            logger.warning("buyback_pool_code_lookup_failed", pool=pool_id, error=str(e))
            return None

        if len(code) == 0:
            return None

        contract = self.w3.eth.contract(address=address, abi=UNISWAP_V3_POOL_ABI)
        return Web3Pool(pool_id, contract)


__all__ = ["UNISWAP_V3_POOL_ABI", "Web3Pool", "Web3PoolProvider"]
