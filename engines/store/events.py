"""
Store Engine — Event Types and Payload Builders
=================================================
Engine: Store
Every accepted command produces exactly one event.
Payload builders read the command and the tick; they never mutate state.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from core.commands.base import Command
from engines.store.commands import (
    STORE_PRODUCT_ADD_REQUEST,
    STORE_PRODUCT_BUY_REQUEST,
    STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
    STORE_PRODUCT_REFUND_REQUEST,
)


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

STORE_PRODUCT_ADDED_V1 = "store.product.added.v1"
STORE_PRODUCT_QUANTITY_UPDATED_V1 = "store.product.quantity_updated.v1"
STORE_PRODUCT_PURCHASED_V1 = "store.product.purchased.v1"
STORE_PRODUCT_REFUNDED_V1 = "store.product.refunded.v1"

STORE_EVENT_TYPES = (
    STORE_PRODUCT_ADDED_V1,
    STORE_PRODUCT_QUANTITY_UPDATED_V1,
    STORE_PRODUCT_PURCHASED_V1,
    STORE_PRODUCT_REFUNDED_V1,
)


# ══════════════════════════════════════════════════════════════
# COMMAND → EVENT MAPPING
# ══════════════════════════════════════════════════════════════

COMMAND_TO_EVENT_TYPE = {
    STORE_PRODUCT_ADD_REQUEST: STORE_PRODUCT_ADDED_V1,
    STORE_PRODUCT_QUANTITY_UPDATE_REQUEST: STORE_PRODUCT_QUANTITY_UPDATED_V1,
    STORE_PRODUCT_BUY_REQUEST: STORE_PRODUCT_PURCHASED_V1,
    STORE_PRODUCT_REFUND_REQUEST: STORE_PRODUCT_REFUNDED_V1,
}


def resolve_store_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


# ══════════════════════════════════════════════════════════════
# APPLIED EVENT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StoreEvent:
    """An event applied to the store projection, in journal order."""
    event_type: str
    tick: int
    payload: dict
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def _base_payload(command: Command) -> dict:
    return {
        "actor_id": command.actor_id,
        "correlation_id": command.correlation_id,
        "command_id": command.command_id,
    }


def build_product_added_payload(command: Command, *, product_id: int) -> dict:
    payload = _base_payload(command)
    payload.update({
        "product_id": product_id,
        "name": command.payload["name"],
        "quantity": command.payload["quantity"],
    })
    return payload


def build_product_quantity_updated_payload(command: Command) -> dict:
    payload = _base_payload(command)
    payload.update({
        "product_id": command.payload["product_id"],
        "new_quantity": command.payload["new_quantity"],
    })
    return payload


def build_product_purchased_payload(command: Command, *, tick: int) -> dict:
    payload = _base_payload(command)
    payload.update({
        "product_id": command.payload["product_id"],
        "buyer_id": command.actor_id,
        "purchased_at_tick": tick,
    })
    return payload


def build_product_refunded_payload(command: Command, *, tick: int) -> dict:
    payload = _base_payload(command)
    payload.update({
        "product_id": command.payload["product_id"],
        "buyer_id": command.actor_id,
        "refunded_at_tick": tick,
    })
    return payload
