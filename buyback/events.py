"""Audit records emitted by the buyback hook.

Every record carries the account that initiated it. Sinks decide what to do
with them: LoggingEventSink writes them to structlog, RecordingEventSink
keeps them in memory (useful for tests and for indexers running in-process).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import ClassVar, Protocol

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuybackEvent:
    """Base class for audit records."""

    name: ClassVar[str] = "buyback_event"

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class PoolConfigured(BuybackEvent):
    name: ClassVar[str] = "pool_configured"

    project_id: int
    settlement_token: str
    pool_id: str
    project_token: str
    fee: int
    twap_window: int
    twap_slippage_tolerance: int
    caller: str


@dataclass(frozen=True)
class TwapWindowChanged(BuybackEvent):
    name: ClassVar[str] = "twap_window_changed"

    project_id: int
    old_window: int
    new_window: int
    caller: str


@dataclass(frozen=True)
class TwapSlippageToleranceChanged(BuybackEvent):
    name: ClassVar[str] = "twap_slippage_tolerance_changed"

    project_id: int
    old_tolerance: int
    new_tolerance: int
    caller: str


@dataclass(frozen=True)
class SwapExecuted(BuybackEvent):
    name: ClassVar[str] = "swap_executed"

    project_id: int
    pool_id: str
    amount_to_swap_with: int
    amount_paid_to_pool: int
    amount_received: int
    caller: str


@dataclass(frozen=True)
class LeftoverDeposited(BuybackEvent):
    name: ClassVar[str] = "leftover_deposited"

    project_id: int
    settlement_token: str
    amount: int
    partial_mint_count: int
    caller: str


@dataclass(frozen=True)
class SettlementMinted(BuybackEvent):
    name: ClassVar[str] = "settlement_minted"

    project_id: int
    beneficiary: str
    swap_amount_received: int
    partial_mint_count: int
    total_minted: int
    caller: str


class EventSink(Protocol):
    """Receives audit records as they are emitted."""

    def emit(self, event: BuybackEvent) -> None: ...


class LoggingEventSink:
    """Writes each record to structlog under its event name."""

    def emit(self, event: BuybackEvent) -> None:
        logger.info(event.name, **event.to_dict())


class RecordingEventSink:
    """Keeps emitted records in memory, optionally forwarding them."""

    def __init__(self, forward_to: EventSink | None = None) -> None:
        self.events: list[BuybackEvent] = []
        self._forward_to = forward_to

    def emit(self, event: BuybackEvent) -> None:
        self.events.append(event)
        if self._forward_to is not None:
            self._forward_to.emit(event)

    def of_type(self, event_type: type[BuybackEvent]) -> list[BuybackEvent]:
        """Records of a given type, in emission order."""
        return [e for e in self.events if isinstance(e, event_type)]

    def snapshot(self) -> int:
        return len(self.events)

    def restore(self, state: int) -> None:
        # Records from a reverted operation never happened
        del self.events[state:]


__all__ = [
    "BuybackEvent",
    "PoolConfigured",
    "TwapWindowChanged",
    "TwapSlippageToleranceChanged",
    "SwapExecuted",
    "LeftoverDeposited",
    "SettlementMinted",
    "EventSink",
    "LoggingEventSink",
    "RecordingEventSink",
]
