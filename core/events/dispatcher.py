"""
Store Event Bus — Delivery
============================
Hands an applied event to each subscription for its type, in
subscription order. The event is already part of the store when it
is delivered: a failing subscriber is recorded in the report and
logged, and the remaining subscribers still run.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple

from core.events.registry import SubscriberRegistry

logger = logging.getLogger("store.events")


class AppliedEvent(Protocol):
    event_type: str
    event_id: uuid.UUID
    payload: dict


@dataclass(frozen=True)
class SubscriberFailure:
    subscriber: str
    error_type: str
    error: str


@dataclass(frozen=True)
class DeliveryReport:
    """What happened when one applied event reached its subscribers."""
    event_id: uuid.UUID
    event_type: str
    product_id: Optional[int]
    delivered_to: Tuple[str, ...] = ()
    failures: Tuple[SubscriberFailure, ...] = ()

    @property
    def failed_subscribers(self) -> Tuple[str, ...]:
        return tuple(f.subscriber for f in self.failures)

    @property
    def fully_delivered(self) -> bool:
        return not self.failures


def deliver(event: AppliedEvent, registry: SubscriberRegistry) -> DeliveryReport:
    """Run every subscription for event.event_type and report the result."""
    product_id: Any = event.payload.get("product_id")
    delivered = []
    failures = []

    for subscription in registry.subscriptions(event.event_type):
        try:
            subscription.handler(event)
        except Exception as exc:
            failures.append(SubscriberFailure(
                subscriber=subscription.name,
                error_type=type(exc).__name__,
                error=str(exc),
            ))
            logger.error(
                f"'{subscription.name}' failed on {event.event_type} "
                f"for product {product_id}: {exc}",
                exc_info=True,
            )
        else:
            delivered.append(subscription.name)

    report = DeliveryReport(
        event_id=event.event_id,
        event_type=event.event_type,
        product_id=product_id,
        delivered_to=tuple(delivered),
        failures=tuple(failures),
    )
    if report.failures:
        logger.warning(
            f"{event.event_type} for product {product_id}: "
            f"{len(report.failures)} subscriber(s) failed "
            f"{list(report.failed_subscribers)}"
        )
    elif report.delivered_to:
        logger.debug(
            f"{event.event_type} for product {product_id} delivered to "
            f"{list(report.delivered_to)}"
        )
    return report
