"""
Store Engine — Facade
=======================
One object per store: wires settings, tick counter, projection,
dispatcher, command bus and service, and exposes each operation as
a plain method.

Every mutating method goes through the command bus. An ACCEPTED
command returns its value; a REJECTED one raises the StoreError
matching its rejection code, and state is left untouched.

Usage:
    ticks = ManualTickCounter()
    store = Store("0xowner", tick_counter=ticks)
    product_id = store.add_product("0xowner", "Vodka", 10)
    store.buy_product("0xbuyer", product_id)
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional, Tuple

from core.commands.bus import CommandBus, CommandResult
from core.commands.dispatcher import CommandDispatcher
from core.config.settings import DEFAULT_REFUND_WINDOW_TICKS, StoreSettings
from core.events.registry import SubscriberRegistry, Subscription
from core.time.temporal import TickWindow
from core.time.ticks import AutoMiningTickCounter, TickCounter
from engines.store.commands import (
    ProductAddRequest,
    ProductBuyRequest,
    ProductQuantityUpdateRequest,
    ProductRefundRequest,
)
from engines.store.errors import ProductNotFound, error_for_reason
from engines.store.events import StoreEvent
from engines.store.policies import MSG_PRODUCT_NOT_FOUND, STORE_POLICIES
from engines.store.services import (
    ProductView,
    PurchaseRecord,
    StoreContext,
    StoreProjectionStore,
    StoreService,
)

logger = logging.getLogger("store.engine")


class Store:
    """Administrator-controlled product catalog with purchases and refunds."""

    def __init__(
        self,
        administrator_id: str,
        *,
        tick_counter: Optional[TickCounter] = None,
        refund_window_ticks: int = DEFAULT_REFUND_WINDOW_TICKS,
        subscriber_registry: Optional[SubscriberRegistry] = None,
    ):
        self._settings = StoreSettings(
            administrator_id=administrator_id,
            refund_window_ticks=refund_window_ticks,
        )
        if tick_counter is None:
            # Each store is its own ledger with its own block height.
            tick_counter = AutoMiningTickCounter()
        self._tick_counter = tick_counter
        self._projection = StoreProjectionStore()
        self._context = StoreContext(
            settings=self._settings,
            tick_counter=self._tick_counter,
            projection_store=self._projection,
        )

        dispatcher = CommandDispatcher(context=self._context)
        for policy in STORE_POLICIES:
            dispatcher.register_policy(policy)

        self._bus = CommandBus(
            dispatcher=dispatcher, admission_listener=self._tick_counter,
        )
        self._service = StoreService(
            context=self._context,
            command_bus=self._bus,
            projection_store=self._projection,
            subscriber_registry=subscriber_registry,
        )

        logger.info(
            f"Store created (administrator: {administrator_id}, "
            f"refund window: {refund_window_ticks} ticks)"
        )

    @classmethod
    def from_settings(
        cls,
        settings: StoreSettings,
        *,
        tick_counter: Optional[TickCounter] = None,
        subscriber_registry: Optional[SubscriberRegistry] = None,
    ) -> Store:
        return cls(
            settings.administrator_id,
            tick_counter=tick_counter,
            refund_window_ticks=settings.refund_window_ticks,
            subscriber_registry=subscriber_registry,
        )

    # ══════════════════════════════════════════════════════════
    # COMMAND SUBMISSION
    # ══════════════════════════════════════════════════════════

    def submit(self, request, caller: str) -> CommandResult:
        """
        Run a typed request as `caller` and return the raw CommandResult.

        Rejections are returned, not raised.
        """
        command = request.to_command(
            actor_id=caller,
            command_id=uuid.uuid4(),
            correlation_id=uuid.uuid4(),
            issued_at_tick=self._tick_counter.current_tick(),
        )
        return self._bus.handle(command)

    def _run(self, request, caller: str):
        result = self.submit(request, caller)
        if result.is_rejected:
            raise error_for_reason(result.reason)
        return result.execution_result

    # ══════════════════════════════════════════════════════════
    # ADMINISTRATOR OPERATIONS
    # ══════════════════════════════════════════════════════════

    def add_product(self, caller: str, name: str, quantity: int) -> int:
        """Append a product; returns its id (0, 1, 2, … in creation order)."""
        execution = self._run(ProductAddRequest(name=name, quantity=quantity), caller)
        return execution.product_id

    def update_product_quantity(
        self, caller: str, product_id: int, new_quantity: int
    ) -> None:
        self._run(
            ProductQuantityUpdateRequest(
                product_id=product_id, new_quantity=new_quantity,
            ),
            caller,
        )

    # ══════════════════════════════════════════════════════════
    # BUYER OPERATIONS
    # ══════════════════════════════════════════════════════════

    def buy_product(self, caller: str, product_id: int) -> None:
        """Buy one unit. One active purchase per buyer and product."""
        self._run(ProductBuyRequest(product_id=product_id), caller)

    def refund_product(self, caller: str, product_id: int) -> None:
        """Return the unit bought earlier, while the refund window is open."""
        self._run(ProductRefundRequest(product_id=product_id), caller)

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def get_product_by_id(self, product_id: int) -> ProductView:
        product = self._projection.get_product(product_id)
        if product is None:
            raise ProductNotFound(MSG_PRODUCT_NOT_FOUND)
        return product

    def get_product_by_name(self, name: str) -> ProductView:
        product = self._projection.find_product_by_name(name)
        if product is None:
            raise ProductNotFound(MSG_PRODUCT_NOT_FOUND)
        return product

    def get_products(self) -> Tuple[ProductView, ...]:
        return self._projection.list_products()

    @property
    def product_count(self) -> int:
        return self._projection.product_count

    def get_purchase(self, product_id: int, buyer_id: str) -> Optional[PurchaseRecord]:
        return self._projection.get_purchase(product_id, buyer_id)

    def has_active_purchase(self, product_id: int, buyer_id: str) -> bool:
        purchase = self._projection.get_purchase(product_id, buyer_id)
        return purchase is not None and purchase.active

    def refund_deadline(self, product_id: int, buyer_id: str) -> Optional[int]:
        """Last tick a refund is still honoured, or None without an active purchase."""
        purchase = self._projection.get_purchase(product_id, buyer_id)
        if purchase is None or not purchase.active:
            return None
        window = TickWindow.following(
            purchase.purchased_at_tick, self._settings.refund_window_ticks,
        )
        return window.end

    @property
    def administrator(self) -> str:
        return self._settings.administrator_id

    @property
    def refund_window_ticks(self) -> int:
        return self._settings.refund_window_ticks

    @property
    def events(self) -> Tuple[StoreEvent, ...]:
        return self._projection.events

    # ══════════════════════════════════════════════════════════
    # SUBSCRIPTIONS
    # ══════════════════════════════════════════════════════════

    def subscribe(
        self,
        event_type: str,
        handler: Callable[[StoreEvent], None],
        subscriber_name: str,
    ) -> Subscription:
        """Call `handler` with every applied event of `event_type`."""
        return self._service.subscriber_registry.subscribe(
            event_type, handler, subscriber_name,
        )

    def unsubscribe(self, event_type: str, subscriber_name: str) -> bool:
        return self._service.subscriber_registry.unsubscribe(
            event_type, subscriber_name,
        )
