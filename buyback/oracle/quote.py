"""TWAP-based minimum swap output.

The quote is a conservative floor, not an expected return: the time-weighted
price over the project's window, less the project's slippage tolerance. Any
problem reading the oracle yields 0, which sends the payment down the mint
path.
"""

from __future__ import annotations

import structlog

from buyback.constants import SLIPPAGE_DENOMINATOR
from buyback.errors import PoolError
from buyback.interfaces import PoolProvider
from buyback.math import UINT128_MAX, arithmetic_mean_tick, get_quote_at_tick
from buyback.pools.registry import PoolRegistry

logger = structlog.get_logger()


class QuoteEngine:
    """Derives slippage-adjusted minimum outputs from pool TWAPs.

    Args:
        registry: Source of pool and TWAP configuration
        pool_provider: Resolves pool identifiers to live pools
    """

    def __init__(self, registry: PoolRegistry, pool_provider: PoolProvider) -> None:
        self.registry = registry
        self.pool_provider = pool_provider

    def quote(
        self,
        project_id: int,
        project_token: str,
        amount_in: int,
        settlement_token: str,
    ) -> int:
        """Minimum project tokens acceptable for `amount_in` of settlement token.

        Args:
            project_id: Project being paid
            project_token: Token the pool pays out
            amount_in: Settlement token amount to price
            settlement_token: Token paid in (native resolves to wrapped)

        Returns:
            TWAP quote minus the slippage tolerance, or 0 if no oracle is available
        """
        config = self.registry.get_config(project_id, settlement_token)
        if config is None:
            logger.debug("buyback_quote_no_pool", project_id=project_id, token=settlement_token)
            return 0

        pool = self.pool_provider.get_pool(config.pool_id)
        if pool is None:
            logger.debug("buyback_quote_pool_missing", project_id=project_id, pool=config.pool_id)
            return 0

        try:
            slot0 = pool.slot0()
        except PoolError as e:
            logger.warning(
                "buyback_quote_probe_failed",
                project_id=project_id,
                pool=config.pool_id,
                error=str(e),
            )
            return 0

        if not slot0.initialized or not slot0.unlocked:
            logger.debug(
                "buyback_quote_pool_unavailable",
                project_id=project_id,
                pool=config.pool_id,
                initialized=slot0.initialized,
                unlocked=slot0.unlocked,
            )
            return 0

        if amount_in > UINT128_MAX:
            logger.warning("buyback_quote_amount_too_large", amount_in=amount_in)
            return 0

        window = config.twap_window
        try:
            tick_cumulatives = pool.observe([window, 0])
        except PoolError as e:
            logger.warning(
                "buyback_quote_observe_failed",
                project_id=project_id,
                pool=config.pool_id,
                window=window,
                error=str(e),
            )
            return 0

        mean_tick = arithmetic_mean_tick(tick_cumulatives, window)
        amount_out = get_quote_at_tick(
            mean_tick,
            amount_in,
            base_token=config.settlement_token,
            quote_token=project_token,
        )
        amount_out -= amount_out * config.twap_slippage_tolerance // SLIPPAGE_DENOMINATOR

        logger.debug(
            "buyback_quote",
            project_id=project_id,
            amount_in=amount_in,
            mean_tick=mean_tick,
            minimum_out=amount_out,
        )
        return amount_out


__all__ = ["QuoteEngine"]
