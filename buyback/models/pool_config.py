"""Pool configuration records held by the registry."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TwapParams:
    """TWAP oracle parameters for a project.

    Attributes:
        window: Seconds the time-weighted average price is taken over
        slippage_tolerance: Basis points (out of 10000) removed from the TWAP quote
    """

    window: int
    slippage_tolerance: int


@dataclass(frozen=True)
class ProjectPoolConfig:
    """Pool configured for a (project, settlement token) pair."""

    pool_id: str
    project_token: str
    settlement_token: str
    twap_window: int
    twap_slippage_tolerance: int

    @property
    def twap_params(self) -> TwapParams:
        return TwapParams(self.twap_window, self.twap_slippage_tolerance)


__all__ = ["TwapParams", "ProjectPoolConfig"]
