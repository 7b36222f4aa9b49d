"""Per-payment types: context, routing results and swap outcomes.

All of these are transient: built for one payment and consumed within the
same atomic operation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PayerQuote:
    """Swap parameters supplied by the payer in the payment metadata."""

    amount_to_swap_with: int
    minimum_swap_amount_out: int


@dataclass(frozen=True)
class PaymentContext:
    """A payment as presented by the invoking terminal.

    Attributes:
        project_id: Project being paid
        payer: Account that paid
        amount_paid: Amount of settlement token paid (smallest units)
        decimals: Decimals of the settlement token amount
        weight: Tokens minted per unit paid, 18-decimal fixed point
        settlement_token: Token paid with (may be the native sentinel)
        beneficiary: Account receiving the project tokens
        metadata: Multiplexed payer metadata (may carry a PayerQuote)
        prefer_claimed_tokens: Beneficiary's claimed-token preference
    """

    project_id: int
    payer: str
    amount_paid: int
    decimals: int
    weight: int
    settlement_token: str
    beneficiary: str
    metadata: bytes = b""
    prefer_claimed_tokens: bool = True


@dataclass(frozen=True)
class MintDirect:
    """Mint at the issuance weight; the hook takes no further action."""

    @property
    def is_swap(self) -> bool:
        return False


@dataclass(frozen=True)
class SwapThenSettle:
    """Buy project tokens from the pool, then settle at `after_pay` time.

    Attributes:
        amount_to_swap_with: Settlement token amount sent into the swap
        leftover_amount: amount_paid - amount_to_swap_with, minted directly
        minimum_swap_amount_out: Payer-supplied or TWAP-derived minimum
        quote_was_explicit: True when the payer supplied the minimum
        project_token_is_zero: True when the project token is the pool's token0
    """

    amount_to_swap_with: int
    leftover_amount: int
    minimum_swap_amount_out: int
    quote_was_explicit: bool
    project_token_is_zero: bool

    @property
    def is_swap(self) -> bool:
        return True


RoutingResult = MintDirect | SwapThenSettle


@dataclass(frozen=True)
class PayParams:
    """What the routing decision reports back to the terminal.

    Attributes:
        weight: Issuance weight the terminal should mint at (0 when swapping)
        result: The routing decision
        forward_amount: Amount the terminal must forward to the hook before settlement
    """

    weight: int
    result: RoutingResult
    forward_amount: int = 0


@dataclass(frozen=True)
class SwapOutcome:
    """Result of attempting the swap against the pool."""

    succeeded: bool
    amount_received: int = 0
    amount_paid_to_pool: int = 0

    @classmethod
    def failed(cls) -> SwapOutcome:
        """Create an outcome for a swap that reverted or had no pool."""
        return cls(succeeded=False)


__all__ = [
    "PayerQuote",
    "PaymentContext",
    "MintDirect",
    "SwapThenSettle",
    "RoutingResult",
    "PayParams",
    "SwapOutcome",
]
