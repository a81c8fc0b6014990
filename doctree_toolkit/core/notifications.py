from __future__ import annotations

"""Publish/subscribe channel decoupling the model from its observers.

Delivery is synchronous and follows subscription order. Each delivery is
isolated: an observer raising is logged and the remaining observers still
receive the event.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

__all__ = [
    "NotificationEvent",
    "Observer",
    "NotificationChannel",
    "CallbackObserver",
    "LoggingObserver",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    """Single broadcast message.

    Attributes
    ----------
    source
        Emitting component: ``"command"``, ``"clipboard"``, ``"traversal"``
        or ``"system"``.
    type
        Transition kind: ``"executed"``, ``"undone"``, ``"redone"``,
        ``"set"``, ``"cleared"`` or ``"progress"``.
    message
        Human-readable text.
    data
        Open payload (current node, counts, sort state...).
    """

    source: str
    type: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Observer(Protocol):
    """Anything with an ``update(event)`` method."""

    def update(self, event: NotificationEvent) -> None:
        ...


class NotificationChannel:
    """Broadcasts events to the observers currently subscribed."""

    def __init__(self) -> None:
        self._observers: List[Observer] = []

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        self._observers = [o for o in self._observers if o is not observer]

    def notify(self, event: NotificationEvent) -> None:
        for observer in list(self._observers):
            try:
                observer.update(event)
            except Exception:
                logger.exception("Observer %r failed on %s/%s event", observer, event.source, event.type)

    @property
    def observers(self) -> List[Observer]:
        return list(self._observers)

    def __len__(self) -> int:
        return len(self._observers)


class CallbackObserver:
    """Forward each non-empty event message to a callable."""

    def __init__(self, callback: Callable[[str], None]) -> None:
        self._callback = callback

    def update(self, event: NotificationEvent) -> None:
        if event.message:
            self._callback(event.message)


class LoggingObserver:
    """Write every event to a logger."""

    def __init__(self, target: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self._logger = target or logger
        self._level = level

    def update(self, event: NotificationEvent) -> None:
        self._logger.log(self._level, "[%s:%s] %s", event.source, event.type, event.message)
