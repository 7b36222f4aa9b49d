"""Storage for pool configuration.

The registry reads and writes through the PoolConfigStore protocol so it can
be backed by anything; InMemoryPoolConfigStore is the default and can take
part in an atomic environment.
"""

from __future__ import annotations

from typing import Protocol

from buyback.models.pool_config import TwapParams
from buyback.models.types import normalize_address


class PoolConfigStore(Protocol):
    """Persistent per-project pool configuration."""

    def get_pool(self, project_id: int, settlement_token: str) -> str | None: ...

    def set_pool(self, project_id: int, settlement_token: str, pool_id: str) -> None: ...

    def get_project_token(self, project_id: int) -> str | None: ...

    def set_project_token(self, project_id: int, project_token: str) -> None: ...

    def get_twap_params(self, project_id: int) -> TwapParams | None: ...

    def set_twap_params(self, project_id: int, params: TwapParams) -> None: ...


class InMemoryPoolConfigStore:
    """Dict-backed store. Token keys are normalized to lowercase."""

    def __init__(self) -> None:
        self._pools: dict[tuple[int, str], str] = {}
        self._project_tokens: dict[int, str] = {}
        self._twap_params: dict[int, TwapParams] = {}

    def get_pool(self, project_id: int, settlement_token: str) -> str | None:
        return self._pools.get((project_id, normalize_address(settlement_token)))

    def set_pool(self, project_id: int, settlement_token: str, pool_id: str) -> None:
        self._pools[(project_id, normalize_address(settlement_token))] = normalize_address(pool_id)

    def get_project_token(self, project_id: int) -> str | None:
        return self._project_tokens.get(project_id)

    def set_project_token(self, project_id: int, project_token: str) -> None:
        self._project_tokens[project_id] = normalize_address(project_token)

    def get_twap_params(self, project_id: int) -> TwapParams | None:
        return self._twap_params.get(project_id)

    def set_twap_params(self, project_id: int, params: TwapParams) -> None:
        self._twap_params[project_id] = params

    def snapshot(self) -> tuple[dict, dict, dict]:
        return dict(self._pools), dict(self._project_tokens), dict(self._twap_params)

    def restore(self, state: tuple[dict, dict, dict]) -> None:
        pools, project_tokens, twap_params = state
        self._pools = dict(pools)
        self._project_tokens = dict(project_tokens)
        self._twap_params = dict(twap_params)


__all__ = ["PoolConfigStore", "InMemoryPoolConfigStore"]
