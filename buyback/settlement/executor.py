"""Swap execution and settlement.

Runs after the terminal has forwarded the payment to the hook:

1. Swap the chosen amount of settlement token for project tokens.
2. Burn everything the swap returned, so the final mint can apply the
   reserved rate and the beneficiary's claimed-token preference uniformly.
3. Enforce the payer's explicit minimum (a TWAP-derived one is only a
   routing threshold).
4. Return unspent funds to the project's balance and mint for them at the
   issuance weight.
5. Mint swap output + partial mint to the beneficiary.

A swap that reverts is not an error: its output is treated as zero and the
whole payment is minted at the issuance weight instead.
"""

from __future__ import annotations

import structlog

from buyback.config import DEFAULT_HOOK_CONFIG, HookConfig
from buyback.constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO
from buyback.environment import AtomicEnvironment
from buyback.errors import PoolError, SpecifiedSlippageExceeded, Unauthorized
from buyback.events import (
    EventSink,
    LeftoverDeposited,
    LoggingEventSink,
    SettlementMinted,
    SwapExecuted,
)
from buyback.interfaces import (
    Controller,
    Directory,
    PaymentTerminal,
    PoolProvider,
    SwappablePool,
    TokenVault,
)
from buyback.math import mul_div
from buyback.models.payment import PaymentContext, SwapOutcome, SwapThenSettle
from buyback.models.types import normalize_address, same_address
from buyback.pools.registry import PoolRegistry
from buyback.settlement.callback import FundRequest

logger = structlog.get_logger()


class SwapExecutor:
    """Executes SwapThenSettle decisions.

    Args:
        address: The hook's own account (holds forwarded funds, receives swap output)
        registry: Pool configuration, re-read at settlement time
        controller: Burns swap output and mints the final token count
        directory: Authenticates the calling terminal
        vault: Token balances
        pool_provider: Resolves pool identifiers to pools
        environment: Atomic regions (the swap runs in a nested one)
        config: Native-token settings
        events: Sink for swap and settlement records
    """

    def __init__(
        self,
        address: str,
        registry: PoolRegistry,
        controller: Controller,
        directory: Directory,
        vault: TokenVault,
        pool_provider: PoolProvider,
        environment: AtomicEnvironment,
        config: HookConfig = DEFAULT_HOOK_CONFIG,
        events: EventSink | None = None,
    ) -> None:
        self.address = normalize_address(address)
        self.registry = registry
        self._controller = controller
        self._directory = directory
        self._vault = vault
        self._pool_provider = pool_provider
        self._environment = environment
        self.config = config
        self._events: EventSink = events if events is not None else LoggingEventSink()

    def settle(
        self,
        context: PaymentContext,
        result: SwapThenSettle,
        terminal: PaymentTerminal,
    ) -> int:
        """Swap, reconcile leftovers and mint for one payment.

        Args:
            context: The payment, as seen at routing time
            result: The routing decision for it
            terminal: The invoking terminal (must be a terminal of the project)

        Returns:
            Total token count minted for the beneficiary (before reserved rate)

        Raises:
            Unauthorized: If the terminal isn't one of the project's terminals
            SpecifiedSlippageExceeded: If an explicit payer minimum wasn't met
        """
        if not self._directory.is_terminal_of(context.project_id, terminal.address):
            raise Unauthorized(
                f"{terminal.address} is not a terminal of project {context.project_id}"
            )

        outcome = self.initiate_swap(context, result)

        if (
            outcome.succeeded
            and result.quote_was_explicit
            and outcome.amount_received < result.minimum_swap_amount_out
        ):
            raise SpecifiedSlippageExceeded(outcome.amount_received, result.minimum_swap_amount_out)

        if outcome.succeeded and outcome.amount_received < result.minimum_swap_amount_out:
            logger.info(
                "buyback_twap_minimum_missed",
                project_id=context.project_id,
                amount_received=outcome.amount_received,
                minimum_swap_amount_out=result.minimum_swap_amount_out,
            )

        remaining = (
            result.leftover_amount + result.amount_to_swap_with - outcome.amount_paid_to_pool
        )
        partial_mint_count = mul_div(remaining, context.weight, 10**context.decimals)

        if remaining > 0:
            self._vault.transfer(
                context.settlement_token, self.address, terminal.address, remaining
            )
            terminal.add_to_balance_of(context.project_id, context.settlement_token, remaining)
            self._events.emit(
                LeftoverDeposited(
                    project_id=context.project_id,
                    settlement_token=normalize_address(context.settlement_token),
                    amount=remaining,
                    partial_mint_count=partial_mint_count,
                    caller=terminal.address,
                )
            )

        total = outcome.amount_received + partial_mint_count
        if total > 0:
            self._controller.mint_tokens_of(
                context.project_id,
                total,
                context.beneficiary,
                prefer_claimed_tokens=context.prefer_claimed_tokens,
                use_reserved_rate=True,
            )
        self._events.emit(
            SettlementMinted(
                project_id=context.project_id,
                beneficiary=normalize_address(context.beneficiary),
                swap_amount_received=outcome.amount_received,
                partial_mint_count=partial_mint_count,
                total_minted=total,
                caller=terminal.address,
            )
        )
        return total

    def initiate_swap(self, context: PaymentContext, result: SwapThenSettle) -> SwapOutcome:
        """Swap against the registered pool and burn what it returns.

        Pool failures are contained: the swap runs in a nested atomic region,
        so a reverted pool call leaves balances untouched and the outcome
        reports failure.
        """
        pool_id = self.registry.pool_of(context.project_id, context.settlement_token)
        if pool_id is None:
            logger.warning("buyback_swap_no_pool", project_id=context.project_id)
            return SwapOutcome.failed()

        pool = self._pool_provider.get_pool(pool_id)
        if pool is None or not isinstance(pool, SwappablePool):
            logger.warning("buyback_swap_pool_missing", project_id=context.project_id, pool=pool_id)
            return SwapOutcome.failed()

        request = FundRequest(
            project_id=context.project_id,
            settlement_token=context.settlement_token,
            pool_id=pool_id,
            project_token_is_zero=result.project_token_is_zero,
            max_amount=result.amount_to_swap_with,
            executor=self,
        )

        # Selling token0 pushes the price down; the limit is the extreme on that side
        zero_for_one = not result.project_token_is_zero
        sqrt_price_limit = MIN_SQRT_RATIO + 1 if zero_for_one else MAX_SQRT_RATIO - 1

        try:
            with self._environment.atomic():
                amount0, amount1 = pool.swap(
                    self.address,
                    zero_for_one,
                    result.amount_to_swap_with,
                    sqrt_price_limit,
                    request,
                )
        except PoolError as e:
            logger.warning(
                "buyback_swap_failed",
                project_id=context.project_id,
                pool=pool_id,
                amount_to_swap_with=result.amount_to_swap_with,
                error=str(e),
            )
            return SwapOutcome.failed()
        finally:
            request.consumed = True

        amount_received = -(amount0 if result.project_token_is_zero else amount1)
        amount_received = max(amount_received, 0)

        if amount_received > 0:
            self._controller.burn_tokens_of(self.address, context.project_id, amount_received)

        self._events.emit(
            SwapExecuted(
                project_id=context.project_id,
                pool_id=pool_id,
                amount_to_swap_with=result.amount_to_swap_with,
                amount_paid_to_pool=request.amount_paid,
                amount_received=amount_received,
                caller=self.address,
            )
        )
        return SwapOutcome(
            succeeded=True,
            amount_received=amount_received,
            amount_paid_to_pool=request.amount_paid,
        )

    def fulfill_fund_request(
        self,
        request: FundRequest,
        caller: str,
        amount0_delta: int,
        amount1_delta: int,
    ) -> None:
        """Pay the pool its swap input; the only legitimate re-entry into the hook.

        Raises:
            Unauthorized: If the request was already used or caller isn't the registered pool
            PoolError: If the pool asks for nothing or more than the swap amount
        """
        if request.consumed:
            raise Unauthorized("Fund request already consumed")

        expected_pool = self.registry.pool_of(request.project_id, request.settlement_token)
        if not same_address(caller, expected_pool) or not same_address(caller, request.pool_id):
            logger.warning(
                "buyback_callback_unauthorized",
                caller=caller,
                expected_pool=expected_pool,
                project_id=request.project_id,
            )
            raise Unauthorized(f"{caller} is not the registered pool")

        amount = request.requested_amount(amount0_delta, amount1_delta)
        if amount <= 0 or amount > request.max_amount:
            raise PoolError(f"Pool requested {amount}, allowed (0, {request.max_amount}]")

        request.consumed = True

        token = self.config.pricing_token(request.settlement_token)
        if self.config.is_native(request.settlement_token):
            self._vault.wrap_native(self.address, amount)
        self._vault.transfer(token, self.address, caller, amount)
        request.amount_paid = amount


__all__ = ["SwapExecutor"]
