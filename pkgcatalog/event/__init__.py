"""Event bus and lifecycle event types."""

from .bus import EventBus, Subscription
from .types import CatalogerResult, CatalogEventType, Event

__all__ = [
    "CatalogEventType",
    "CatalogerResult",
    "Event",
    "EventBus",
    "Subscription",
]
