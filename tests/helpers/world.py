"""A hook wired to fakes, for unit and integration tests."""

from dataclasses import dataclass

from buyback.environment import SnapshotEnvironment
from buyback.events import RecordingEventSink
from buyback.hook import BuybackHook
from buyback.models.metadata import build_payer_metadata
from buyback.models.payment import PaymentContext
from buyback.pools.store import InMemoryPoolConfigStore
from tests.helpers import (
    BENEFICIARY,
    FEE_MEDIUM,
    HOOK,
    ONE,
    OWNER,
    PAYER,
    PROJECT_ID,
    PROJECT_TOKEN,
    RESERVED_BENEFICIARY,
    TERMINAL,
    TWAP_TOLERANCE,
    TWAP_WINDOW,
    WETH,
    FakeController,
    FakeDirectory,
    FakePermissions,
    FakePool,
    FakePoolProvider,
    FakeTerminal,
    FakeVault,
)

POOL_LIQUIDITY = 10**30


@dataclass
class World:
    """A hook wired to in-memory collaborators, sharing one atomic environment."""

    vault: FakeVault
    controller: FakeController
    permissions: FakePermissions
    directory: FakeDirectory
    provider: FakePoolProvider
    store: InMemoryPoolConfigStore
    events: RecordingEventSink
    environment: SnapshotEnvironment
    hook: BuybackHook
    terminal: FakeTerminal

    def configure_pool(
        self,
        settlement_token: str = WETH,
        *,
        fee: int = FEE_MEDIUM,
        twap_window: int = TWAP_WINDOW,
        twap_slippage_tolerance: int = TWAP_TOLERANCE,
        **pool_kwargs,
    ) -> FakePool:
        """Register a pool through the registry and deploy a fake at its address."""
        pool_id = self.hook.registry.set_pool(
            OWNER, PROJECT_ID, settlement_token, fee, twap_window, twap_slippage_tolerance
        )
        project_token = self.controller.token_of(PROJECT_ID)
        pool = FakePool(
            pool_id,
            project_token,
            self.hook.config.pricing_token(settlement_token),
            self.vault,
            **pool_kwargs,
        )
        self.vault.mint(project_token, pool.address, POOL_LIQUIDITY)
        self.provider.add(pool)
        return pool

    def context(
        self,
        amount_paid: int = ONE,
        *,
        weight: int = ONE,
        settlement_token: str = WETH,
        decimals: int = 18,
        quote: tuple[int, int] | None = None,
        metadata: bytes = b"",
        prefer_claimed_tokens: bool = True,
    ) -> PaymentContext:
        """Payment context for PROJECT_ID, optionally carrying a payer quote."""
        if quote is not None:
            metadata = build_payer_metadata(self.hook.config.metadata_tag, *quote)
        return PaymentContext(
            project_id=PROJECT_ID,
            payer=PAYER,
            amount_paid=amount_paid,
            decimals=decimals,
            weight=weight,
            settlement_token=settlement_token,
            beneficiary=BENEFICIARY,
            metadata=metadata,
            prefer_claimed_tokens=prefer_claimed_tokens,
        )

    def fund_payer(self, amount: int, token: str = WETH) -> None:
        self.vault.mint(token, PAYER, amount)

    def state(self) -> tuple:
        """Everything a reverted payment must leave untouched."""
        return (
            self.vault.snapshot(),
            self.controller.snapshot(),
            self.terminal.snapshot(),
            len(self.events.events),
        )


def build_world(project_token: str = PROJECT_TOKEN, reserved_rate: int = 0) -> World:
    vault = FakeVault()
    controller = FakeController(vault, RESERVED_BENEFICIARY)
    controller.issue_token(PROJECT_ID, project_token, reserved_rate)
    permissions = FakePermissions({PROJECT_ID: OWNER})
    directory = FakeDirectory()
    directory.add_terminal(PROJECT_ID, TERMINAL)
    provider = FakePoolProvider()
    store = InMemoryPoolConfigStore()
    events = RecordingEventSink()
    environment = SnapshotEnvironment([vault, controller, store, events])
    hook = BuybackHook(
        HOOK,
        controller=controller,
        permissions=permissions,
        directory=directory,
        vault=vault,
        pool_provider=provider,
        environment=environment,
        store=store,
        events=events,
    )
    terminal = FakeTerminal(TERMINAL, vault, controller, environment)
    environment.register(terminal)
    return World(
        vault=vault,
        controller=controller,
        permissions=permissions,
        directory=directory,
        provider=provider,
        store=store,
        events=events,
        environment=environment,
        hook=hook,
        terminal=terminal,
    )


