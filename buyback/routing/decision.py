"""Mint-or-swap routing decision.

Compares how many tokens the payer would get by minting at the issuance
weight against the best minimum the pool can guarantee, and picks the path
that gives more. Equal outcomes mint: no swap is attempted when both paths
are expected to yield the same result.
"""

from __future__ import annotations

import structlog

from buyback.config import DEFAULT_HOOK_CONFIG, HookConfig
from buyback.errors import InsufficientPayAmount
from buyback.math import mul_div
from buyback.models.metadata import decode_payer_quote
from buyback.models.payment import MintDirect, PaymentContext, PayParams, SwapThenSettle
from buyback.oracle.quote import QuoteEngine
from buyback.pools.address import is_token0
from buyback.pools.registry import PoolRegistry

logger = structlog.get_logger()


class RoutingDecision:
    """Decides how a payment should be turned into project tokens.

    Args:
        registry: Source of the project token
        quote_engine: TWAP minimum when the payer didn't supply one
        config: Metadata tag and native-token settings
    """

    def __init__(
        self,
        registry: PoolRegistry,
        quote_engine: QuoteEngine,
        config: HookConfig = DEFAULT_HOOK_CONFIG,
    ) -> None:
        self.registry = registry
        self.quote_engine = quote_engine
        self.config = config

    def decide(self, context: PaymentContext) -> PayParams:
        """Route a payment.

        Returns:
            PayParams carrying the decision, the weight the terminal should
            mint at (0 when swapping) and the amount to forward to the hook

        Raises:
            MalformedMetadata: If the payer's buyback block can't be decoded
            InsufficientPayAmount: If a swap is chosen for more than was paid
        """
        amount_to_swap_with = 0
        minimum_swap_amount_out = 0

        payer_quote = decode_payer_quote(self.config.metadata_tag, context.metadata)
        if payer_quote is not None:
            amount_to_swap_with = payer_quote.amount_to_swap_with
            minimum_swap_amount_out = payer_quote.minimum_swap_amount_out

        if amount_to_swap_with == 0:
            amount_to_swap_with = context.amount_paid

        quote_was_explicit = minimum_swap_amount_out != 0

        mint_only_count = mul_div(amount_to_swap_with, context.weight, 10**context.decimals)

        settlement_token = self.config.pricing_token(context.settlement_token)
        project_token = self.registry.project_token_of(context.project_id)

        if minimum_swap_amount_out == 0 and project_token is not None:
            minimum_swap_amount_out = self.quote_engine.quote(
                context.project_id,
                project_token,
                amount_to_swap_with,
                settlement_token,
            )

        if mint_only_count >= minimum_swap_amount_out:
            logger.debug(
                "buyback_route_mint",
                project_id=context.project_id,
                mint_only_count=mint_only_count,
                minimum_swap_amount_out=minimum_swap_amount_out,
            )
            return PayParams(weight=context.weight, result=MintDirect())

        if amount_to_swap_with > context.amount_paid:
            raise InsufficientPayAmount(
                f"Asked to swap {amount_to_swap_with} but only {context.amount_paid} was paid"
            )

        # Without a configured token the swap can't happen; settlement falls back to minting
        project_token_is_zero = project_token is not None and is_token0(
            project_token, settlement_token
        )

        result = SwapThenSettle(
            amount_to_swap_with=amount_to_swap_with,
            leftover_amount=context.amount_paid - amount_to_swap_with,
            minimum_swap_amount_out=minimum_swap_amount_out,
            quote_was_explicit=quote_was_explicit,
            project_token_is_zero=project_token_is_zero,
        )
        logger.info(
            "buyback_route_swap",
            project_id=context.project_id,
            mint_only_count=mint_only_count,
            amount_to_swap_with=amount_to_swap_with,
            leftover_amount=result.leftover_amount,
            minimum_swap_amount_out=minimum_swap_amount_out,
            quote_was_explicit=quote_was_explicit,
        )
        return PayParams(weight=0, result=result, forward_amount=context.amount_paid)


__all__ = ["RoutingDecision"]
