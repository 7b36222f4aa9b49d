"""Shared type definitions for buyback models."""

from typing import Annotated, Any

from pydantic import Field

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def validate_uint256(value: Any) -> int:
    """Validate that a value is a valid uint256.

    Accepts ints and decimal strings (JSON clients often send large amounts
    as strings to avoid float precision loss).

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def address_to_int(address: str) -> int:
    """Numeric value of an address, used for canonical token ordering."""
    return int(normalize_address(address), 16)


def same_address(a: str | None, b: str | None) -> bool:
    """Case-insensitive address equality (None never matches)."""
    if a is None or b is None:
        return False
    return normalize_address(a) == normalize_address(b)
