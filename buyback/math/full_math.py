"""512-bit precision mul/div on unsigned token amounts.

Python integers never overflow, so the only things to guard are the ones
the on-chain FullMath library reverts on:
- Division by zero raises DivisionByZero
- Results that do not fit in uint256 raise Uint256Overflow

Usage:
    from buyback.math import mul_div

    token_count = mul_div(amount_paid, weight, 10**decimals)
"""

from __future__ import annotations

UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1


class FullMathError(ArithmeticError):
    """Base class for fixed-point arithmetic errors."""

    pass


class DivisionByZero(FullMathError):
    """Division by zero."""

    pass


class Uint256Overflow(FullMathError):
    """Value is negative or exceeds the uint256 maximum."""

    pass


def _check_uint256(name: str, value: int) -> None:
    if value < 0:
        raise Uint256Overflow(f"Negative value cannot be uint256: {name}={value}")
    if value > UINT256_MAX:
        raise Uint256Overflow(f"Value exceeds uint256 max: {name}={value}")


def mul_div(a: int, b: int, denominator: int) -> int:
    """Compute floor(a * b / denominator) with full precision.

    Raises:
        DivisionByZero: If denominator is zero
        Uint256Overflow: If an operand or the result is outside uint256
    """
    _check_uint256("a", a)
    _check_uint256("b", b)
    if denominator == 0:
        raise DivisionByZero(f"Division by zero: {a} * {b} // 0")
    result = (a * b) // denominator
    _check_uint256("result", result)
    return result


__all__ = [
    "UINT128_MAX",
    "UINT256_MAX",
    "FullMathError",
    "DivisionByZero",
    "Uint256Overflow",
    "mul_div",
]
