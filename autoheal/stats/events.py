"""Structured healing events that callers can subscribe to."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class EventKind(str, Enum):
    ATTEMPT = "attempt"
    HEAL = "heal"
    FAILURE = "failure"
    RETRY = "retry"
    NAVIGATION = "navigation"


@dataclass(frozen=True)
class HealingEvent:
    kind: EventKind
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


Subscriber = Callable[[HealingEvent], None]


class EventStream:
    """Synchronous fan-out to subscribers, in subscription order."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, event: HealingEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)
