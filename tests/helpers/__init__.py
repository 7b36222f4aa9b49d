"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token addresses, accounts and common amounts
- fakes: In-memory ledger, controller, pool and terminal collaborators
"""

from tests.helpers.constants import (
    BENEFICIARY,
    FEE_MEDIUM,
    HIGH_PROJECT_TOKEN,
    HOOK,
    NATIVE,
    ONE,
    OPERATOR,
    OWNER,
    PAYER,
    PROJECT_ID,
    PROJECT_TOKEN,
    RESERVED_BENEFICIARY,
    STRANGER,
    TERMINAL,
    TWAP_TOLERANCE,
    TWAP_WINDOW,
    USDC,
    WETH,
)
from tests.helpers.fakes import (
    FakeController,
    FakeDirectory,
    FakePermissions,
    FakePool,
    FakePoolProvider,
    FakeTerminal,
    FakeVault,
    InsufficientBalance,
)

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "NATIVE",
    "PROJECT_ID",
    "PROJECT_TOKEN",
    "HIGH_PROJECT_TOKEN",
    "OWNER",
    "OPERATOR",
    "STRANGER",
    "PAYER",
    "BENEFICIARY",
    "RESERVED_BENEFICIARY",
    "TERMINAL",
    "HOOK",
    "ONE",
    "FEE_MEDIUM",
    "TWAP_WINDOW",
    "TWAP_TOLERANCE",
    # Fakes
    "FakeVault",
    "FakeController",
    "FakePermissions",
    "FakeDirectory",
    "FakePool",
    "FakePoolProvider",
    "FakeTerminal",
    "InsufficientBalance",
]
