"""
Store Engine — Request Commands
=================================
Typed store requests that convert into canonical Command objects.

Requests only check argument TYPES. Value rules (empty names,
zero quantities, unknown products) are policy decisions so that
access control is always judged first.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from core.commands.base import Command


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

STORE_PRODUCT_ADD_REQUEST = "store.product.add.request"
STORE_PRODUCT_QUANTITY_UPDATE_REQUEST = "store.product.update_quantity.request"
STORE_PRODUCT_BUY_REQUEST = "store.product.buy.request"
STORE_PRODUCT_REFUND_REQUEST = "store.product.refund.request"

STORE_COMMAND_TYPES = frozenset({
    STORE_PRODUCT_ADD_REQUEST,
    STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
    STORE_PRODUCT_BUY_REQUEST,
    STORE_PRODUCT_REFUND_REQUEST,
})

ADMIN_COMMAND_TYPES = frozenset({
    STORE_PRODUCT_ADD_REQUEST,
    STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
})


def _require_int(field_name: str, value) -> None:
    # bool is an int subclass; a flag is never a quantity or an id.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"{field_name} must be int, got {type(value).__name__}."
        )


def _build_command(
    command_type: str,
    payload: dict,
    *,
    actor_id: str,
    command_id: uuid.UUID,
    correlation_id: uuid.UUID,
    issued_at_tick: int,
) -> Command:
    return Command(
        command_id=command_id,
        command_type=command_type,
        actor_id=actor_id,
        payload=payload,
        issued_at_tick=issued_at_tick,
        correlation_id=correlation_id,
        source_engine="store",
    )


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProductAddRequest:
    """Administrator request to append a product to the catalog."""
    name: str
    quantity: int

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(
                f"name must be str, got {type(self.name).__name__}."
            )
        _require_int("quantity", self.quantity)

    def to_command(
        self,
        *,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at_tick: int,
    ) -> Command:
        return _build_command(
            STORE_PRODUCT_ADD_REQUEST,
            {"name": self.name, "quantity": self.quantity},
            actor_id=actor_id,
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at_tick=issued_at_tick,
        )


@dataclass(frozen=True)
class ProductQuantityUpdateRequest:
    """Administrator request to overwrite a product's quantity."""
    product_id: int
    new_quantity: int

    def __post_init__(self):
        _require_int("product_id", self.product_id)
        _require_int("new_quantity", self.new_quantity)

    def to_command(
        self,
        *,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at_tick: int,
    ) -> Command:
        return _build_command(
            STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
            {"product_id": self.product_id, "new_quantity": self.new_quantity},
            actor_id=actor_id,
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at_tick=issued_at_tick,
        )


@dataclass(frozen=True)
class ProductBuyRequest:
    """Buyer request for one unit of a product."""
    product_id: int

    def __post_init__(self):
        _require_int("product_id", self.product_id)

    def to_command(
        self,
        *,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at_tick: int,
    ) -> Command:
        return _build_command(
            STORE_PRODUCT_BUY_REQUEST,
            {"product_id": self.product_id},
            actor_id=actor_id,
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at_tick=issued_at_tick,
        )


@dataclass(frozen=True)
class ProductRefundRequest:
    """Buyer request to return the unit bought earlier."""
    product_id: int

    def __post_init__(self):
        _require_int("product_id", self.product_id)

    def to_command(
        self,
        *,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at_tick: int,
    ) -> Command:
        return _build_command(
            STORE_PRODUCT_REFUND_REQUEST,
            {"product_id": self.product_id},
            actor_id=actor_id,
            command_id=command_id,
            correlation_id=correlation_id,
            issued_at_tick=issued_at_tick,
        )
