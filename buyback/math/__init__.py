"""Fixed-point and Uniswap V3 oracle math."""

from buyback.math.full_math import (
    UINT128_MAX,
    UINT256_MAX,
    DivisionByZero,
    FullMathError,
    Uint256Overflow,
    mul_div,
)
from buyback.math.oracle import arithmetic_mean_tick, get_quote_at_tick
from buyback.math.tick_math import MAX_TICK, MIN_TICK, InvalidTick, get_sqrt_ratio_at_tick

__all__ = [
    "UINT128_MAX",
    "UINT256_MAX",
    "FullMathError",
    "DivisionByZero",
    "Uint256Overflow",
    "mul_div",
    "MIN_TICK",
    "MAX_TICK",
    "InvalidTick",
    "get_sqrt_ratio_at_tick",
    "arithmetic_mean_tick",
    "get_quote_at_tick",
]
