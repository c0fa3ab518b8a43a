"""
Store Event Bus — Subscriber Registry
=======================================
Named subscriptions per event type.

A registry built with a fixed set of event types refuses any other
type, so a misspelt subscription fails at wiring time instead of
silently never firing. Subscriber names are unique per event type
and delivery follows subscription order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    UnknownEventType,
)

logger = logging.getLogger("store.events")


@dataclass(frozen=True)
class Subscription:
    event_type: str
    name: str
    handler: Callable[[Any], None]


class SubscriberRegistry:
    """
    Thread-safe map of event type → ordered named subscriptions.

    Usage:
        registry = SubscriberRegistry(event_types=STORE_EVENT_TYPES)
        registry.subscribe("store.product.purchased.v1", on_sale, "indexer")
    """

    def __init__(self, event_types: Optional[Iterable[str]] = None):
        self._event_types = frozenset(event_types) if event_types is not None else None
        self._subscriptions: Dict[str, Dict[str, Subscription]] = {}
        self._lock = Lock()

    def _check_event_type(self, event_type: Any) -> None:
        if not isinstance(event_type, str) or not event_type:
            raise UnknownEventType(event_type)
        if self._event_types is not None and event_type not in self._event_types:
            raise UnknownEventType(event_type)

    def subscribe(
        self,
        event_type: str,
        handler: Callable[[Any], None],
        name: str,
    ) -> Subscription:
        """
        Add a named subscription and return it.

        Raises:
            UnknownEventType:         event_type not carried by this registry
            DuplicateSubscriberError: name already used for event_type
            EventBusError:            handler not callable or name empty
        """
        self._check_event_type(event_type)
        if not callable(handler):
            raise EventBusError(f"Handler must be callable, got {type(handler)}.")
        if not isinstance(name, str) or not name:
            raise EventBusError("Subscriber name must be a non-empty string.")

        subscription = Subscription(event_type=event_type, name=name, handler=handler)
        with self._lock:
            by_name = self._subscriptions.setdefault(event_type, {})
            if name in by_name:
                raise DuplicateSubscriberError(event_type, name)
            by_name[name] = subscription

        logger.info(f"'{name}' subscribed to {event_type}")
        return subscription

    def unsubscribe(self, event_type: str, name: str) -> bool:
        """Drop a subscription. Returns False when there was none."""
        with self._lock:
            removed = self._subscriptions.get(event_type, {}).pop(name, None)
        if removed is not None:
            logger.info(f"'{name}' unsubscribed from {event_type}")
        return removed is not None

    def subscriptions(self, event_type: str) -> Tuple[Subscription, ...]:
        with self._lock:
            return tuple(self._subscriptions.get(event_type, {}).values())
