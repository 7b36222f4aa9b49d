"""Deterministic Uniswap V3 pool addresses (CREATE2).

A pool's address depends only on the factory, the sorted token pair and the
fee tier, so it can be computed and stored before the pool is deployed.
Whether a contract actually lives there is checked later by the oracle.
"""

from __future__ import annotations

from eth_utils import keccak

from buyback.constants import POOL_INIT_CODE_HASH
from buyback.models.types import ZERO_ADDRESS, address_to_int, normalize_address


class InvalidPoolTokens(ValueError):
    """Token pair can't form a pool (zero address or identical tokens)."""

    pass


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two tokens the way the factory does (numerically ascending).

    Raises:
        InvalidPoolTokens: If either token is the zero address or both are equal
    """
    a = normalize_address(token_a, validate=True)
    b = normalize_address(token_b, validate=True)
    if a == ZERO_ADDRESS or b == ZERO_ADDRESS:
        raise InvalidPoolTokens("Pool tokens cannot be the zero address")
    if a == b:
        raise InvalidPoolTokens(f"Pool tokens must differ: {a}")
    if address_to_int(a) < address_to_int(b):
        return a, b
    return b, a


def is_token0(token: str, other: str) -> bool:
    """True if `token` sorts before `other`, i.e. is the pool's token0."""
    return address_to_int(token) < address_to_int(other)


def compute_pool_address(
    factory: str,
    token_a: str,
    token_b: str,
    fee: int,
    init_code_hash: str = POOL_INIT_CODE_HASH,
) -> str:
    """Compute the address of the pool for a token pair and fee tier.

    Args:
        factory: Uniswap V3 factory address
        token_a: One token of the pair (any order, any case)
        token_b: The other token
        fee: Fee tier in hundredths of a basis point (e.g., 3000 = 0.3%)
        init_code_hash: keccak256 of the pool creation code

    Returns:
        Lowercase pool address

    Raises:
        InvalidPoolTokens: If the pair is invalid
        ValueError: If the factory is the zero address or fee doesn't fit uint24
    """
    from eth_abi import encode  # type: ignore[attr-defined]

    factory_norm = normalize_address(factory, validate=True)
    if factory_norm == ZERO_ADDRESS:
        raise ValueError("Factory cannot be the zero address")
    if not 0 <= fee < 2**24:
        raise ValueError(f"Fee must fit in uint24: {fee}")

    token0, token1 = sort_tokens(token_a, token_b)
    salt = keccak(
        encode(
            ["address", "address", "uint24"],
            [bytes.fromhex(token0[2:]), bytes.fromhex(token1[2:]), fee],
        )
    )

    digest = keccak(
        b"\xff"
        + bytes.fromhex(factory_norm[2:])
        + salt
        + bytes.fromhex(init_code_hash.removeprefix("0x"))
    )
    return "0x" + digest[12:].hex()


__all__ = ["InvalidPoolTokens", "sort_tokens", "is_token0", "compute_pool_address"]
