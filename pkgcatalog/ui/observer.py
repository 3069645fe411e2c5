"""Progress observer that waits for a catalog run to finish."""

from __future__ import annotations

import queue
from typing import Callable, Optional

from ..event import CatalogEventType, Event, Subscription
from ..logging import get_logger

FinishedHandler = Callable[[Event], None]

logger = get_logger("ui.observer")


class ProgressObserver:
    """Drains a subscription until the terminal event or a worker error.

    Each step first looks at the worker error queue without blocking, then
    waits up to ``poll_interval`` seconds for the next event, so an error
    that is ready at the same time as the terminal event always wins.
    """

    def __init__(self, on_finished: FinishedHandler, *, poll_interval: float = 0.05) -> None:
        self.on_finished = on_finished
        self.poll_interval = poll_interval

    def run(
        self,
        worker_errors: "queue.Queue[Optional[BaseException]]",
        subscription: Subscription,
    ) -> None:
        """Block until the run finishes; re-raise the first worker error seen."""
        while True:
            error = self._next_worker_error(worker_errors)
            if error is not None:
                raise error

            try:
                event = subscription.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

            # an error that arrived while waiting still takes precedence
            error = self._next_worker_error(worker_errors)
            if error is not None:
                raise error

            if event is None:
                logger.debug("Event bus closed before the catalog finished")
                return

            if event.type is not CatalogEventType.CATALOG_FINISHED:
                continue

            try:
                self.on_finished(event)
            except Exception as exc:
                logger.error("Unable to handle catalog finished event: %s", exc)
            return

    @staticmethod
    def _next_worker_error(
        worker_errors: "queue.Queue[Optional[BaseException]]",
    ) -> Optional[BaseException]:
        while True:
            try:
                error = worker_errors.get_nowait()
            except queue.Empty:
                return None
            if error is not None:
                return error


__all__ = ["FinishedHandler", "ProgressObserver"]
