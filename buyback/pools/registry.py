"""Pool registry for buyback configuration.

Holds, per project and settlement token, the Uniswap V3 pool the hook buys
from, plus the project token and the project's TWAP parameters. All
mutations are gated by the permissions collaborator and validate TWAP
bounds before touching the store.
"""

from __future__ import annotations

import structlog

from buyback.config import DEFAULT_HOOK_CONFIG, HookConfig
from buyback.constants import (
    MAX_TWAP_SLIPPAGE_TOLERANCE,
    MAX_TWAP_WINDOW,
    MIN_TWAP_SLIPPAGE_TOLERANCE,
    MIN_TWAP_WINDOW,
)
from buyback.errors import (
    InvalidTwapSlippageTolerance,
    InvalidTwapWindow,
    NoProjectToken,
    PoolAlreadySet,
    PoolNotSet,
    Unauthorized,
)
from buyback.events import (
    EventSink,
    LoggingEventSink,
    PoolConfigured,
    TwapSlippageToleranceChanged,
    TwapWindowChanged,
)
from buyback.interfaces import BuybackPermission, Controller, Permissions
from buyback.models.pool_config import ProjectPoolConfig, TwapParams
from buyback.models.types import ZERO_ADDRESS, normalize_address
from buyback.pools.address import compute_pool_address
from buyback.pools.store import InMemoryPoolConfigStore, PoolConfigStore

logger = structlog.get_logger()


def validate_twap_window(window: int) -> None:
    """Raises InvalidTwapWindow unless MIN_TWAP_WINDOW <= window <= MAX_TWAP_WINDOW."""
    if not MIN_TWAP_WINDOW <= window <= MAX_TWAP_WINDOW:
        raise InvalidTwapWindow(
            f"TWAP window {window}s outside [{MIN_TWAP_WINDOW}, {MAX_TWAP_WINDOW}]"
        )


def validate_twap_slippage_tolerance(tolerance: int) -> None:
    """Raises InvalidTwapSlippageTolerance unless it is within the allowed bps range."""
    if not MIN_TWAP_SLIPPAGE_TOLERANCE <= tolerance <= MAX_TWAP_SLIPPAGE_TOLERANCE:
        raise InvalidTwapSlippageTolerance(
            f"TWAP slippage tolerance {tolerance} outside "
            f"[{MIN_TWAP_SLIPPAGE_TOLERANCE}, {MAX_TWAP_SLIPPAGE_TOLERANCE}]"
        )


class PoolRegistry:
    """Per-project pool and TWAP configuration.

    Args:
        controller: Resolves the project's token when a pool is set
        permissions: Owner / operator checks for configuration calls
        store: Backing store (in-memory if None)
        config: Factory, init code hash and native-token settings
        events: Sink for configuration records
    """

    def __init__(
        self,
        controller: Controller,
        permissions: Permissions,
        store: PoolConfigStore | None = None,
        config: HookConfig = DEFAULT_HOOK_CONFIG,
        events: EventSink | None = None,
    ) -> None:
        self._controller = controller
        self._permissions = permissions
        self.store: PoolConfigStore = store if store is not None else InMemoryPoolConfigStore()
        self.config = config
        self._events: EventSink = events if events is not None else LoggingEventSink()

    def _require_permission(
        self, caller: str, project_id: int, permission: BuybackPermission
    ) -> None:
        if not self._permissions.has_permission(caller, project_id, permission):
            logger.warning(
                "buyback_config_unauthorized",
                caller=caller,
                project_id=project_id,
                permission=permission.value,
            )
            raise Unauthorized(
                f"{caller} lacks {permission.value} permission for project {project_id}"
            )

    def _current_twap_params(self, project_id: int) -> TwapParams:
        # Window and tolerance are only ever stored together, by set_pool.
        params = self.store.get_twap_params(project_id)
        if params is None:
            raise PoolNotSet(f"Project {project_id} has no pool configured")
        return params

    # --- Configuration ---

    def set_pool(
        self,
        caller: str,
        project_id: int,
        settlement_token: str,
        fee: int,
        twap_window: int,
        twap_slippage_tolerance: int,
    ) -> str:
        """Configure the pool the hook buys project tokens from.

        Native currency is stored under its wrapped token, since that's what
        the pool actually trades.

        Args:
            caller: Account making the change
            project_id: Project to configure
            settlement_token: Token payments arrive in
            fee: Pool fee tier (e.g., 3000 for 0.3%)
            twap_window: TWAP window in seconds
            twap_slippage_tolerance: Basis points removed from TWAP quotes

        Returns:
            The derived pool identifier

        Raises:
            Unauthorized: If caller lacks CHANGE_POOL
            InvalidTwapWindow: If the window is out of bounds
            InvalidTwapSlippageTolerance: If the tolerance is out of bounds
            NoProjectToken: If the project hasn't issued a token
            PoolAlreadySet: If this pair already has a pool
        """
        self._require_permission(caller, project_id, BuybackPermission.CHANGE_POOL)
        validate_twap_window(twap_window)
        validate_twap_slippage_tolerance(twap_slippage_tolerance)

        project_token = self._controller.token_of(project_id)
        if project_token is None or normalize_address(project_token) == ZERO_ADDRESS:
            raise NoProjectToken(f"Project {project_id} has no token")
        project_token = normalize_address(project_token)

        token = self.config.pricing_token(settlement_token)
        pool_id = compute_pool_address(
            self.config.factory,
            project_token,
            token,
            fee,
            self.config.pool_init_code_hash,
        )

        existing = self.store.get_pool(project_id, token)
        if existing is not None:
            raise PoolAlreadySet(
                f"Project {project_id} already has pool {existing} for {token}"
            )

        self.store.set_pool(project_id, token, pool_id)
        self.store.set_project_token(project_id, project_token)
        self.store.set_twap_params(project_id, TwapParams(twap_window, twap_slippage_tolerance))

        self._events.emit(
            PoolConfigured(
                project_id=project_id,
                settlement_token=token,
                pool_id=pool_id,
                project_token=project_token,
                fee=fee,
                twap_window=twap_window,
                twap_slippage_tolerance=twap_slippage_tolerance,
                caller=caller,
            )
        )
        return pool_id

    def set_twap_window(self, caller: str, project_id: int, new_window: int) -> None:
        """Change the TWAP window, keeping the slippage tolerance.

        Raises:
            Unauthorized: If caller lacks SET_POOL_PARAMS
            InvalidTwapWindow: If the window is out of bounds
            PoolNotSet: If the project has no pool yet
        """
        self._require_permission(caller, project_id, BuybackPermission.SET_POOL_PARAMS)
        validate_twap_window(new_window)

        current = self._current_twap_params(project_id)
        self.store.set_twap_params(
            project_id, TwapParams(new_window, current.slippage_tolerance)
        )
        self._events.emit(
            TwapWindowChanged(
                project_id=project_id,
                old_window=current.window,
                new_window=new_window,
                caller=caller,
            )
        )

    def set_twap_slippage_tolerance(
        self, caller: str, project_id: int, new_tolerance: int
    ) -> None:
        """Change the TWAP slippage tolerance, keeping the window.

        Raises:
            Unauthorized: If caller lacks SET_POOL_PARAMS
            InvalidTwapSlippageTolerance: If the tolerance is out of bounds
            PoolNotSet: If the project has no pool yet
        """
        self._require_permission(caller, project_id, BuybackPermission.SET_POOL_PARAMS)
        validate_twap_slippage_tolerance(new_tolerance)

        current = self._current_twap_params(project_id)
        self.store.set_twap_params(project_id, TwapParams(current.window, new_tolerance))
        self._events.emit(
            TwapSlippageToleranceChanged(
                project_id=project_id,
                old_tolerance=current.slippage_tolerance,
                new_tolerance=new_tolerance,
                caller=caller,
            )
        )

    # --- Reads ---

    def pool_of(self, project_id: int, settlement_token: str) -> str | None:
        """Pool identifier for a pair (native currency resolves to wrapped)."""
        return self.store.get_pool(project_id, self.config.pricing_token(settlement_token))

    def project_token_of(self, project_id: int) -> str | None:
        return self.store.get_project_token(project_id)

    def twap_params_of(self, project_id: int) -> TwapParams | None:
        return self.store.get_twap_params(project_id)

    def get_config(self, project_id: int, settlement_token: str) -> ProjectPoolConfig | None:
        """Full configuration for a pair, or None if no pool is set."""
        token = self.config.pricing_token(settlement_token)
        pool_id = self.store.get_pool(project_id, token)
        project_token = self.store.get_project_token(project_id)
        params = self.store.get_twap_params(project_id)
        if pool_id is None or project_token is None or params is None:
            return None
        return ProjectPoolConfig(
            pool_id=pool_id,
            project_token=project_token,
            settlement_token=token,
            twap_window=params.window,
            twap_slippage_tolerance=params.slippage_tolerance,
        )


__all__ = [
    "PoolRegistry",
    "validate_twap_window",
    "validate_twap_slippage_tolerance",
]
