"""All-or-nothing execution for exchange operations.

Every public mutating operation on the exchange runs inside ``atomic``:

- a ReentrancyGuard refuses nested entry while the operation is in flight,
  including re-entry from a token callback during an external transfer;
- each participant (the exchange's own state, the custody backend and the
  pending-event outbox) is checkpointed on entry and restored if the
  operation raises. A participant without checkpoint/restore is refused.

The guard is released on every exit path, success or failure.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

import structlog

from swapper.errors import ReentrantCall

logger = structlog.get_logger()


@runtime_checkable
class Transactional(Protocol):
    """Component whose state can be captured and rolled back."""

    def checkpoint(self) -> Any:
        """Capture current state in an opaque token."""
        ...

    def restore(self, state: Any) -> None:
        """Roll back to a state returned by checkpoint()."""
        ...


class ReentrancyGuard:
    """Single mutex scoped to one top-level operation at a time."""

    def __init__(self) -> None:
        self._entered: str | None = None

    @property
    def locked(self) -> bool:
        return self._entered is not None

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        """Hold the guard for the duration of ``operation``.

        Raises:
            ReentrantCall: If another operation already holds the guard
        """
        if self._entered is not None:
            logger.warning(
                "reentrant_call_rejected",
                operation=operation,
                in_progress=self._entered,
            )
            raise ReentrantCall(
                f"Cannot enter {operation} while {self._entered} is in progress"
            )
        self._entered = operation
        try:
            yield
        finally:
            self._entered = None


@contextmanager
def atomic(
    guard: ReentrancyGuard,
    operation: str,
    participants: tuple[Transactional, ...],
) -> Iterator[None]:
    """Run a block as one indivisible unit.

    Args:
        guard: Reentrancy guard shared by all operations of one exchange
        operation: Operation name (for errors and logs)
        participants: Components to checkpoint and restore on failure

    Raises:
        TypeError: If a participant cannot checkpoint and restore itself
        ReentrantCall: If an operation is already in progress. Nothing is
            rolled back in that case because nothing was checkpointed.
    """
    for participant in participants:
        if not isinstance(participant, Transactional):
            raise TypeError(
                f"{type(participant).__name__} cannot take part in {operation}: "
                "it has no checkpoint/restore"
            )
    with guard.enter(operation):
        saved = [(p, p.checkpoint()) for p in participants]
        try:
            yield
        except BaseException:
            for participant, state in reversed(saved):
                participant.restore(state)
            logger.debug("operation_rolled_back", operation=operation)
            raise
