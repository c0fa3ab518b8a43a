"""
Store Event Bus — Errors
==========================
Raised while managing subscriptions. Delivery itself never raises;
subscriber failures are collected in the DeliveryReport.
"""


class EventBusError(Exception):
    """Base error for subscription management."""
    pass


class UnknownEventType(EventBusError):
    """Subscription requested for an event type the registry does not carry."""

    def __init__(self, event_type):
        self.event_type = event_type
        super().__init__(f"No such event type to subscribe to: {event_type!r}.")


class DuplicateSubscriberError(EventBusError):
    """A subscriber with this name already listens to this event type."""

    def __init__(self, event_type: str, name: str):
        self.event_type = event_type
        self.name = name
        super().__init__(
            f"Subscriber '{name}' is already listening to '{event_type}'."
        )
