"""
Store Event Bus — Public API
==============================
The projection applies state. The event bus tells subscribers about it.
"""

from core.events.dispatcher import (
    AppliedEvent,
    DeliveryReport,
    SubscriberFailure,
    deliver,
)
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    UnknownEventType,
)
from core.events.registry import SubscriberRegistry, Subscription

__all__ = [
    "deliver",
    "AppliedEvent",
    "DeliveryReport",
    "SubscriberFailure",
    "SubscriberRegistry",
    "Subscription",
    "EventBusError",
    "UnknownEventType",
    "DuplicateSubscriberError",
]
