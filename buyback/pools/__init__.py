"""Pool configuration package.

Provides PoolRegistry for per-project pool configuration and the
deterministic pool address derivation it relies on.
"""

from .address import InvalidPoolTokens, compute_pool_address, is_token0, sort_tokens
from .registry import PoolRegistry, validate_twap_slippage_tolerance, validate_twap_window
from .store import InMemoryPoolConfigStore, PoolConfigStore

__all__ = [
    "PoolRegistry",
    "PoolConfigStore",
    "InMemoryPoolConfigStore",
    "InvalidPoolTokens",
    "compute_pool_address",
    "is_token0",
    "sort_tokens",
    "validate_twap_window",
    "validate_twap_slippage_tolerance",
]
