"""Protocols for the collaborators the buyback hook talks to.

The hook owns none of these: the terminal moves payments, the controller
issues tokens, the pool trades, the vault holds balances. Tests inject
in-memory fakes; production wires real clients.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class BuybackPermission(Enum):
    """Permissions a project owner can delegate for buyback configuration."""

    CHANGE_POOL = "change_pool"
    SET_POOL_PARAMS = "set_pool_params"


class Permissions(Protocol):
    """Owner / delegated-operator check."""

    def has_permission(self, caller: str, project_id: int, permission: BuybackPermission) -> bool:
        """True if caller owns the project or holds the delegated permission."""
        ...


class Directory(Protocol):
    """Knows which terminals are allowed to act for a project."""

    def is_terminal_of(self, project_id: int, terminal: str) -> bool: ...


class Controller(Protocol):
    """Token-issuance controller."""

    def token_of(self, project_id: int) -> str | None:
        """Address of the project's token, or None if none was issued."""
        ...

    def mint_tokens_of(
        self,
        project_id: int,
        token_count: int,
        beneficiary: str,
        *,
        prefer_claimed_tokens: bool = True,
        use_reserved_rate: bool = True,
    ) -> int:
        """Mint tokens, applying the reserved rate; returns the beneficiary's share."""
        ...

    def burn_tokens_of(self, holder: str, project_id: int, token_count: int) -> None: ...


class PaymentTerminal(Protocol):
    """The ledger that invoked the hook."""

    @property
    def address(self) -> str: ...

    def add_to_balance_of(self, project_id: int, token: str, amount: int) -> None:
        """Credit funds already transferred to the terminal to the project's balance."""
        ...


class TokenVault(Protocol):
    """Token balances, including the native currency and its wrapped form."""

    def balance_of(self, token: str, account: str) -> int: ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None: ...

    def wrap_native(self, account: str, amount: int) -> None:
        """Convert `amount` of account's native currency into the wrapped token."""
        ...


@dataclass(frozen=True)
class Slot0:
    """Live pool state relevant to oracle use."""

    sqrt_price_x96: int
    tick: int
    observation_cardinality: int
    unlocked: bool

    @property
    def initialized(self) -> bool:
        return self.sqrt_price_x96 != 0


class PoolOracle(Protocol):
    """Read-only view of a pool."""

    @property
    def address(self) -> str: ...

    def slot0(self) -> Slot0:
        """Raises PoolError if the state can't be read."""
        ...

    def observe(self, seconds_agos: Sequence[int]) -> list[int]:
        """Tick cumulatives at each `seconds_ago`; raises PoolError if unavailable."""
        ...


class SwapCallback(Protocol):
    """Invoked by the pool mid-swap to collect the input funds."""

    def __call__(self, caller: str, amount0_delta: int, amount1_delta: int) -> None: ...


@runtime_checkable
class SwappablePool(PoolOracle, Protocol):
    """A pool the hook can trade against."""

    def swap(
        self,
        recipient: str,
        zero_for_one: bool,
        amount_specified: int,
        sqrt_price_limit_x96: int,
        callback: SwapCallback,
    ) -> tuple[int, int]:
        """Execute a swap and return (amount0, amount1) deltas from the pool's view.

        Positive deltas were paid into the pool, negative deltas were paid out.

        Raises:
            PoolError: If the pool reverts
        """
        ...


class PoolProvider(Protocol):
    """Resolves a pool identifier to a live pool, if one exists there."""

    def get_pool(self, pool_id: str) -> PoolOracle | None: ...


__all__ = [
    "BuybackPermission",
    "Permissions",
    "Directory",
    "Controller",
    "PaymentTerminal",
    "TokenVault",
    "Slot0",
    "PoolOracle",
    "SwapCallback",
    "SwappablePool",
    "PoolProvider",
]
