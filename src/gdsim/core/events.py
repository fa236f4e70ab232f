from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
from typing import Any, Callable, DefaultDict
from uuid import uuid4

from gdsim.contracts import EventType, GameEvent

EventHandler = Callable[[GameEvent], None]


def event_id() -> str:
    return f"ev_{uuid4().hex[:12]}"


class EventBus:
    """Outbound channel for engine events; the engine only publishes."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []
        self._events: list[GameEvent] = []
        self._counter: DefaultDict[EventType, int] = defaultdict(int)

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def emit(self, event_type: EventType, **payload: Any) -> GameEvent:
        event = GameEvent(
            event_id=event_id(),
            time=datetime.now(UTC),
            sequence=len(self._events) + 1,
            event_type=event_type,
            payload=payload,
        )
        self.publish(event)
        return event

    def publish(self, event: GameEvent) -> None:
        self._events.append(event)
        self._counter[event.event_type] += 1
        for handler in self._handlers:
            handler(event)

    def events(self, event_type: EventType | None = None) -> list[GameEvent]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.event_type == event_type]

    def emitted_count(self, event_type: EventType | None = None) -> int:
        if event_type is None:
            return sum(self._counter.values())
        return self._counter[event_type]
