"""Uniswap V3 OracleLibrary helpers (consult + getQuoteAtTick)."""

from __future__ import annotations

from collections.abc import Sequence

from buyback.math.full_math import DivisionByZero, mul_div
from buyback.math.tick_math import get_sqrt_ratio_at_tick
from buyback.models.types import address_to_int

_Q128 = 1 << 128
_Q192 = 1 << 192
_UINT128_MAX = (1 << 128) - 1


def arithmetic_mean_tick(tick_cumulatives: Sequence[int], window: int) -> int:
    """Mean tick from a pair of tick cumulatives observed `window` seconds apart.

    Args:
        tick_cumulatives: (cumulative at now - window, cumulative at now)
        window: Seconds between the two observations

    Returns:
        The arithmetic mean tick, rounded toward negative infinity

    Raises:
        DivisionByZero: If window is zero
        ValueError: If fewer than two cumulatives are given
    """
    if window == 0:
        raise DivisionByZero("TWAP window cannot be zero")
    if len(tick_cumulatives) < 2:
        raise ValueError(f"Expected two tick cumulatives, got {len(tick_cumulatives)}")

    delta = tick_cumulatives[1] - tick_cumulatives[0]
    # Solidity int division truncates toward zero
    mean = abs(delta) // window
    if delta < 0:
        mean = -mean
        if abs(delta) % window != 0:
            mean -= 1
    return mean


def get_quote_at_tick(tick: int, base_amount: int, base_token: str, quote_token: str) -> int:
    """Amount of quote_token received for base_amount of base_token at a tick.

    Args:
        tick: Tick value used to calculate the quote
        base_amount: Amount of base token to convert (must fit in uint128)
        base_token: Token the amount is denominated in
        quote_token: Token the result is denominated in

    Returns:
        Amount of quote_token
    """
    if not 0 <= base_amount <= _UINT128_MAX:
        raise ValueError(f"Base amount must fit in uint128: {base_amount}")

    sqrt_ratio_x96 = get_sqrt_ratio_at_tick(tick)
    base_is_token0 = address_to_int(base_token) < address_to_int(quote_token)

    # Keep precision when the squared ratio still fits in 256 bits
    if sqrt_ratio_x96 <= _UINT128_MAX:
        ratio_x192 = sqrt_ratio_x96 * sqrt_ratio_x96
        if base_is_token0:
            return mul_div(ratio_x192, base_amount, _Q192)
        return mul_div(_Q192, base_amount, ratio_x192)

    ratio_x128 = mul_div(sqrt_ratio_x96, sqrt_ratio_x96, 1 << 64)
    if base_is_token0:
        return mul_div(ratio_x128, base_amount, _Q128)
    return mul_div(_Q128, base_amount, ratio_x128)


__all__ = ["arithmetic_mean_tick", "get_quote_at_tick"]
