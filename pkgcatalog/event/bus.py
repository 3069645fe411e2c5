"""Broadcast publish/subscribe channel between the orchestrator and observers."""

from __future__ import annotations

import queue
import threading
from typing import Iterator, List, Optional

from ..logging import get_logger
from .types import Event

logger = get_logger("event.bus")

_CLOSED = object()


class Subscription:
    """One subscriber's view of the bus: every event published after subscribing."""

    def __init__(self, bus: Optional["EventBus"] = None) -> None:
        self._bus = bus
        self._queue: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self._closed = False

    def get(self, timeout: Optional[float] = None) -> Optional[Event]:
        """Return the next event, or ``None`` once the subscription is closed.

        Raises :class:`queue.Empty` when ``timeout`` elapses first.
        """
        if self._closed and self._queue.empty():
            return None
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            self._closed = True
            return None
        return item  # type: ignore[return-value]

    def events(self) -> Iterator[Event]:
        """Yield events as they arrive until the bus is closed."""
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def unsubscribe(self) -> None:
        if self._bus is not None:
            self._bus._detach(self)
            self._bus = None
        self._close()

    def _deliver(self, event: Event) -> None:
        self._queue.put(event)

    def _close(self) -> None:
        self._queue.put(_CLOSED)


class EventBus:
    """Fans every published event out to each subscription's own queue."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []
        self._closed = False

    def subscribe(self) -> Subscription:
        with self._lock:
            subscription = Subscription(self)
            if self._closed:
                subscription._close()
            else:
                self._subscriptions.append(subscription)
            return subscription

    def publish(self, event: Event) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Dropping %s event published after close", event.type.value)
                return
            for subscription in self._subscriptions:
                subscription._deliver(event)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _detach(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)


__all__ = ["EventBus", "Subscription"]
