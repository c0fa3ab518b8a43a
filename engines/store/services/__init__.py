"""
Store Engine — Application Service
====================================
Orchestrates store commands → events → projection.

The projection store is the only owner of the catalog and the
purchase ledger. Policies read it through StoreContext; only
StoreService writes to it, and only after a command is ACCEPTED.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from core.commands.base import Command
from core.config.settings import StoreSettings
from core.events.dispatcher import DeliveryReport, deliver
from core.events.registry import SubscriberRegistry
from core.time.ticks import TickCounter
from engines.store.commands import (
    STORE_COMMAND_TYPES,
    STORE_PRODUCT_ADD_REQUEST,
    STORE_PRODUCT_BUY_REQUEST,
    STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
    STORE_PRODUCT_REFUND_REQUEST,
)
from engines.store.events import (
    STORE_EVENT_TYPES,
    STORE_PRODUCT_ADDED_V1,
    STORE_PRODUCT_PURCHASED_V1,
    STORE_PRODUCT_QUANTITY_UPDATED_V1,
    STORE_PRODUCT_REFUNDED_V1,
    StoreEvent,
    build_product_added_payload,
    build_product_purchased_payload,
    build_product_quantity_updated_payload,
    build_product_refunded_payload,
    resolve_store_event_type,
)

logger = logging.getLogger("store.engine")


# ══════════════════════════════════════════════════════════════
# READ MODELS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProductView:
    """Snapshot of a catalog entry. Never a live reference."""
    product_id: int
    name: str
    quantity: int


@dataclass(frozen=True)
class PurchaseRecord:
    """
    Purchase ledger entry for one (product, buyer) pair.

    active is True while the bought unit has not been refunded.
    """
    product_id: int
    buyer_id: str
    active: bool
    purchased_at_tick: int


@dataclass
class _ProductRecord:
    name: str
    quantity: int


# ══════════════════════════════════════════════════════════════
# PROJECTION STORE
# ══════════════════════════════════════════════════════════════

class StoreProjectionStore:
    """
    In-memory catalog + purchase ledger built from applied events.

    Invariants:
        - product ids are dense and assigned in creation order
        - quantity never goes below zero
        - at most one active purchase per (product, buyer)
    """

    def __init__(self):
        self._events: List[StoreEvent] = []
        self._products: List[_ProductRecord] = []
        self._purchases: Dict[Tuple[int, str], PurchaseRecord] = {}

    def apply(self, event: StoreEvent) -> None:
        # Every branch checks before it writes; a failed check leaves
        # the projection untouched.
        payload = event.payload

        if event.event_type == STORE_PRODUCT_ADDED_V1:
            if payload["product_id"] != len(self._products):
                raise ValueError(
                    f"Product id {payload['product_id']} out of sequence; "
                    f"next id is {len(self._products)}."
                )
            self._products.append(
                _ProductRecord(name=payload["name"], quantity=payload["quantity"])
            )

        elif event.event_type == STORE_PRODUCT_QUANTITY_UPDATED_V1:
            product = self._require(payload["product_id"])
            if payload["new_quantity"] < 0:
                raise ValueError("Product quantity cannot be negative.")
            product.quantity = payload["new_quantity"]

        elif event.event_type == STORE_PRODUCT_PURCHASED_V1:
            product = self._require(payload["product_id"])
            key = (payload["product_id"], payload["buyer_id"])
            if product.quantity <= 0:
                raise ValueError("Cannot purchase a product with no stock.")
            current = self._purchases.get(key)
            if current is not None and current.active:
                raise ValueError(f"Active purchase already recorded for {key}.")
            product.quantity -= 1
            self._purchases[key] = PurchaseRecord(
                product_id=payload["product_id"],
                buyer_id=payload["buyer_id"],
                active=True,
                purchased_at_tick=payload["purchased_at_tick"],
            )

        elif event.event_type == STORE_PRODUCT_REFUNDED_V1:
            product = self._require(payload["product_id"])
            key = (payload["product_id"], payload["buyer_id"])
            current = self._purchases.get(key)
            if current is None or not current.active:
                raise ValueError(f"No active purchase recorded for {key}.")
            product.quantity += 1
            self._purchases[key] = replace(current, active=False)

        else:
            raise ValueError(f"Unknown store event type: {event.event_type}")

        self._events.append(event)

    def _require(self, product_id: int) -> _ProductRecord:
        if not self.has_product(product_id):
            raise ValueError(f"Product {product_id} does not exist.")
        return self._products[product_id]

    # ── Catalog queries ───────────────────────────────────────

    def has_product(self, product_id: Any) -> bool:
        return (
            isinstance(product_id, int)
            and not isinstance(product_id, bool)
            and 0 <= product_id < len(self._products)
        )

    def get_product(self, product_id: Any) -> Optional[ProductView]:
        if not self.has_product(product_id):
            return None
        record = self._products[product_id]
        return ProductView(
            product_id=product_id, name=record.name, quantity=record.quantity,
        )

    def find_product_by_name(self, name: str) -> Optional[ProductView]:
        """First catalog entry (creation order) whose name matches exactly."""
        for product_id, record in enumerate(self._products):
            if record.name == name:
                return ProductView(
                    product_id=product_id,
                    name=record.name,
                    quantity=record.quantity,
                )
        return None

    def list_products(self) -> Tuple[ProductView, ...]:
        return tuple(
            ProductView(product_id=i, name=r.name, quantity=r.quantity)
            for i, r in enumerate(self._products)
        )

    @property
    def product_count(self) -> int:
        return len(self._products)

    # ── Purchase ledger queries ───────────────────────────────

    def get_purchase(self, product_id: Any, buyer_id: str) -> Optional[PurchaseRecord]:
        return self._purchases.get((product_id, buyer_id))

    @property
    def events(self) -> Tuple[StoreEvent, ...]:
        return tuple(self._events)

    @property
    def event_count(self) -> int:
        return len(self._events)


# ══════════════════════════════════════════════════════════════
# COMMAND CONTEXT
# ══════════════════════════════════════════════════════════════

class StoreContext:
    """
    Read-only view handed to the dispatcher and every policy.

    Implements CommandContextProtocol.
    """

    def __init__(
        self,
        *,
        settings: StoreSettings,
        tick_counter: TickCounter,
        projection_store: StoreProjectionStore,
    ):
        self._settings = settings
        self._tick_counter = tick_counter
        self._projection_store = projection_store

    def supports_command_type(self, command_type: str) -> bool:
        return command_type in STORE_COMMAND_TYPES

    def current_tick(self) -> int:
        return self._tick_counter.current_tick()

    @property
    def administrator_id(self) -> str:
        return self._settings.administrator_id

    @property
    def refund_window_ticks(self) -> int:
        return self._settings.refund_window_ticks

    def get_product(self, product_id: Any) -> Optional[ProductView]:
        return self._projection_store.get_product(product_id)

    def get_purchase(self, product_id: Any, buyer_id: str) -> Optional[PurchaseRecord]:
        return self._projection_store.get_purchase(product_id, buyer_id)


# ══════════════════════════════════════════════════════════════
# EXECUTION RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StoreExecutionResult:
    event: StoreEvent
    product_id: int
    delivery: Optional[DeliveryReport] = None


# ══════════════════════════════════════════════════════════════
# COMMAND HANDLER
# ══════════════════════════════════════════════════════════════

class _StoreCommandHandler:
    def __init__(self, service: "StoreService"):
        self._service = service

    def execute(self, command: Command) -> StoreExecutionResult:
        return self._service._execute_command(command)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class StoreService:
    """
    Store engine application service.

    Orchestrates, for ACCEPTED commands only:
    1. Command → event type resolution
    2. Payload building (stamped with the current tick)
    3. Projection update
    4. Delivery to subscribers
    """

    def __init__(
        self,
        *,
        context: StoreContext,
        command_bus,
        projection_store: StoreProjectionStore,
        subscriber_registry: SubscriberRegistry | None = None,
    ):
        self._context = context
        self._command_bus = command_bus
        self._projection_store = projection_store
        self._subscriber_registry = subscriber_registry or SubscriberRegistry(
            event_types=STORE_EVENT_TYPES,
        )

        self._register_handlers()

    def _register_handlers(self) -> None:
        handler = _StoreCommandHandler(self)
        for command_type in sorted(STORE_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _build_payload(self, command: Command, tick: int) -> dict:
        command_type = command.command_type
        if command_type == STORE_PRODUCT_ADD_REQUEST:
            return build_product_added_payload(
                command, product_id=self._projection_store.product_count,
            )
        if command_type == STORE_PRODUCT_QUANTITY_UPDATE_REQUEST:
            return build_product_quantity_updated_payload(command)
        if command_type == STORE_PRODUCT_BUY_REQUEST:
            return build_product_purchased_payload(command, tick=tick)
        if command_type == STORE_PRODUCT_REFUND_REQUEST:
            return build_product_refunded_payload(command, tick=tick)
        raise ValueError(f"No payload builder for: {command_type}")

    def _execute_command(self, command: Command) -> StoreExecutionResult:
        event_type = resolve_store_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported store command type: {command.command_type}"
            )

        tick = self._context.current_tick()
        event = StoreEvent(
            event_type=event_type,
            tick=tick,
            payload=self._build_payload(command, tick),
        )

        self._projection_store.apply(event)
        logger.info(
            f"Applied {event_type} for product "
            f"{event.payload['product_id']} at tick {tick} "
            f"(actor: {command.actor_id})"
        )

        delivery = deliver(event, self._subscriber_registry)

        return StoreExecutionResult(
            event=event,
            product_id=event.payload["product_id"],
            delivery=delivery,
        )

    @property
    def projection_store(self) -> StoreProjectionStore:
        return self._projection_store

    @property
    def subscriber_registry(self) -> SubscriberRegistry:
        return self._subscriber_registry
