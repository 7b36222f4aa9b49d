"""Single-use fund request handed to the pool for one swap.

The pool calls the request back mid-swap to collect its input. The request
only accepts the pool it was issued for and only once, so the callback can't
be replayed or used to re-enter the hook.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from buyback.errors import Unauthorized

if TYPE_CHECKING:
    from buyback.settlement.executor import SwapExecutor


@dataclass
class FundRequest:
    """Capability letting one pool pull one swap's input from the hook.

    Attributes:
        project_id: Project the swap buys for
        settlement_token: Token the payment arrived in (may be native)
        pool_id: The only pool allowed to redeem this request
        project_token_is_zero: Pool token ordering, fixed at routing time
        max_amount: Upper bound on what the pool may request
    """

    project_id: int
    settlement_token: str
    pool_id: str
    project_token_is_zero: bool
    max_amount: int
    executor: SwapExecutor | None = None
    consumed: bool = False
    amount_paid: int = 0

    def __call__(self, caller: str, amount0_delta: int, amount1_delta: int) -> None:
        if self.executor is None:
            raise Unauthorized("Fund request is not bound to an executor")
        self.executor.fulfill_fund_request(self, caller, amount0_delta, amount1_delta)

    def requested_amount(self, amount0_delta: int, amount1_delta: int) -> int:
        """The delta owed in settlement token (the side that isn't the project token)."""
        return amount1_delta if self.project_token_is_zero else amount0_delta


__all__ = ["FundRequest"]
