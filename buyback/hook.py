"""Buyback hook: the entry point terminals call.

The hook composes the pool registry, the TWAP quote engine, the routing
decision and the swap executor. Terminals call it twice per payment:

    params = hook.pay_params(context)          # before recording the payment
    ...                                        # terminal forwards params.forward_amount
    hook.after_pay(context, params.result, terminal)

`after_pay` runs in one atomic region; any failure inside it undoes every
transfer, burn and mint it made.
"""

from __future__ import annotations

import structlog

from buyback.config import DEFAULT_HOOK_CONFIG, HookConfig
from buyback.environment import AtomicEnvironment, SnapshotEnvironment
from buyback.events import EventSink, LoggingEventSink
from buyback.interfaces import (
    Controller,
    Directory,
    PaymentTerminal,
    Permissions,
    PoolProvider,
    TokenVault,
)
from buyback.models.payment import PaymentContext, PayParams, RoutingResult, SwapThenSettle
from buyback.models.types import normalize_address
from buyback.oracle.quote import QuoteEngine
from buyback.pools.registry import PoolRegistry
from buyback.pools.store import PoolConfigStore
from buyback.routing.decision import RoutingDecision
from buyback.settlement.executor import SwapExecutor

logger = structlog.get_logger()


class BuybackHook:
    """Routes payments between direct minting and pool buybacks.

    Args:
        address: The hook's own account
        controller: Token-issuance controller
        permissions: Configuration permission checks
        directory: Terminal authentication
        vault: Token balances
        pool_provider: Pool lookup
        environment: Atomic regions (a participant-less SnapshotEnvironment if None)
        store: Pool configuration store (in-memory if None)
        config: Deployment settings
        events: Sink for audit records
    """

    def __init__(
        self,
        address: str,
        controller: Controller,
        permissions: Permissions,
        directory: Directory,
        vault: TokenVault,
        pool_provider: PoolProvider,
        environment: AtomicEnvironment | None = None,
        store: PoolConfigStore | None = None,
        config: HookConfig = DEFAULT_HOOK_CONFIG,
        events: EventSink | None = None,
    ) -> None:
        self.address = normalize_address(address)
        self.config = config
        self.environment: AtomicEnvironment = (
            environment if environment is not None else SnapshotEnvironment()
        )
        events = events if events is not None else LoggingEventSink()

        self.registry = PoolRegistry(
            controller=controller,
            permissions=permissions,
            store=store,
            config=config,
            events=events,
        )
        self.quote_engine = QuoteEngine(self.registry, pool_provider)
        self.routing = RoutingDecision(self.registry, self.quote_engine, config)
        self.executor = SwapExecutor(
            address=self.address,
            registry=self.registry,
            controller=controller,
            directory=directory,
            vault=vault,
            pool_provider=pool_provider,
            environment=self.environment,
            config=config,
            events=events,
        )

    def pay_params(self, context: PaymentContext) -> PayParams:
        """Decide how a payment should be turned into tokens."""
        return self.routing.decide(context)

    def after_pay(
        self,
        context: PaymentContext,
        result: RoutingResult,
        terminal: PaymentTerminal,
    ) -> int:
        """Settle a payment once the terminal has forwarded its funds.

        Returns:
            Tokens minted for the beneficiary by the hook (0 for MintDirect)
        """
        if not isinstance(result, SwapThenSettle):
            return 0
        with self.environment.atomic():
            return self.executor.settle(context, result, terminal)

    def quote(self, project_id: int, amount_in: int, settlement_token: str) -> int:
        """TWAP-derived minimum for a prospective payment (0 if unavailable)."""
        project_token = self.registry.project_token_of(project_id)
        if project_token is None:
            return 0
        return self.quote_engine.quote(
            project_id,
            project_token,
            amount_in,
            self.config.pricing_token(settlement_token),
        )


__all__ = ["BuybackHook"]
