"""Atomic execution environment.

Each payment's decision-and-settlement sequence must be all-or-nothing. The
hook never unwinds partial work itself; it runs inside `atomic()` and the
environment restores every participating state holder when an exception
escapes. Blocks nest: an inner block that fails is undone without touching
work done earlier in the outer block (a reverted sub-call).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()


@runtime_checkable
class Snapshottable(Protocol):
    """State holder that can capture and restore its state."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


class AtomicEnvironment(Protocol):
    """Supplies all-or-nothing regions."""

    def atomic(self) -> Any:
        """Return a context manager; any exception inside undoes all effects."""
        ...


class SnapshotEnvironment:
    """In-process atomic environment built on participant snapshots.

    Usage:
        env = SnapshotEnvironment([vault, controller, store])
        with env.atomic():
            ...  # any exception restores vault, controller and store
    """

    def __init__(self, participants: Iterable[Snapshottable] = ()) -> None:
        self._participants: list[Snapshottable] = list(participants)
        self._depth = 0

    def register(self, participant: Snapshottable) -> None:
        """Add a state holder to future atomic regions."""
        if not isinstance(participant, Snapshottable):
            raise TypeError(f"{type(participant).__name__} does not support snapshot/restore")
        self._participants.append(participant)

    @property
    def depth(self) -> int:
        """Nesting depth of the currently open atomic regions."""
        return self._depth

    @contextmanager
    def atomic(self) -> Iterator[None]:
        states = [(p, p.snapshot()) for p in self._participants]
        self._depth += 1
        try:
            yield
        except BaseException as e:
            for participant, state in reversed(states):
                participant.restore(state)
            logger.debug(
                "atomic_region_reverted",
                depth=self._depth,
                error_type=type(e).__name__,
            )
            raise
        finally:
            self._depth -= 1


__all__ = ["Snapshottable", "AtomicEnvironment", "SnapshotEnvironment"]
