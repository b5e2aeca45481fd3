"""Append-only notification channel.

The exchange writes events to an EventSink and never reads them back.
Events raised during an operation are held in PendingEvents and handed to
the sink only once the operation commits, so a sink never sees a
notification for something that was rolled back and needs no undo support
of its own. EventLog is the in-memory sink used by default.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()

E = TypeVar("E", bound=BaseModel)


class EventSink(Protocol):
    """Destination for exchange notifications."""

    def emit(self, event: BaseModel) -> None:
        """Record a notification."""
        ...


class PendingEvents:
    """Per-operation outbox in front of an EventSink.

    Components emit here while an operation runs; flush() delivers the
    batch in order after commit, and restore() drops whatever a failed
    operation queued.
    """

    def __init__(self, sink: EventSink) -> None:
        self.sink = sink
        self._pending: list[BaseModel] = []

    def emit(self, event: BaseModel) -> None:
        self._pending.append(event)

    @property
    def pending(self) -> tuple[BaseModel, ...]:
        return tuple(self._pending)

    def flush(self) -> None:
        """Deliver queued events to the sink and empty the queue."""
        batch, self._pending = self._pending, []
        for event in batch:
            self.sink.emit(event)

    # --- Transactional ---

    def checkpoint(self) -> int:
        return len(self._pending)

    def restore(self, state: int) -> None:
        dropped = len(self._pending) - state
        del self._pending[state:]
        if dropped:
            logger.debug("pending_events_dropped", count=dropped)


class EventLog:
    """In-memory, append-only event log.

    Usage:
        log = EventLog()
        swapper = Swapper(owner=OWNER, custody=bank, events=log)
        ...
        swaps = log.of_type(TokenSwapped)
    """

    def __init__(self) -> None:
        self._events: list[BaseModel] = []

    def emit(self, event: BaseModel) -> None:
        self._events.append(event)
        logger.debug("event_emitted", kind=getattr(event, "kind", type(event).__name__))

    @property
    def events(self) -> tuple[BaseModel, ...]:
        """All events in emission order."""
        return tuple(self._events)

    def of_type(self, event_type: type[E]) -> list[E]:
        """Events of one model type, in emission order."""
        return [e for e in self._events if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self._events)
