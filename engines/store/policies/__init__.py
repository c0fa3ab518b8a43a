"""
Store Engine — Policies
=========================
Engine-specific validation policies for store operations.

Each policy inspects the command and a read-only store context and
returns a RejectionReason or None. Policies never mutate state.

STORE_POLICIES is the registration order. Each command type sees
its own checks in this order:

    add             administrator → name → quantity
    update_quantity administrator → product exists → non-negative
    buy             product exists → in stock → no duplicate purchase
    refund          active purchase → refund window
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.time.temporal import is_expired
from engines.store.commands import (
    ADMIN_COMMAND_TYPES,
    STORE_PRODUCT_ADD_REQUEST,
    STORE_PRODUCT_BUY_REQUEST,
    STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
    STORE_PRODUCT_REFUND_REQUEST,
)


# ══════════════════════════════════════════════════════════════
# REJECTION MESSAGES
# ══════════════════════════════════════════════════════════════

MSG_UNAUTHORIZED = "Ownable: caller is not the owner"
MSG_NAME_REQUIRED = "You have to enter a name!"
MSG_QUANTITY_ZERO = "Quantity can't be 0!"
MSG_QUANTITY_NEGATIVE = "Quantity can't be negative!"
MSG_PRODUCT_NOT_FOUND = "This product does not exist!"
MSG_DUPLICATE_PURCHASE = "You cannot buy the same product more than once!"
MSG_NO_ACTIVE_PURCHASE = (
    "You've already returned your product or didn't even bought it."
)
MSG_REFUND_DENIED = "Sorry, your request for refund has been denied."


# ══════════════════════════════════════════════════════════════
# ACCESS CONTROL
# ══════════════════════════════════════════════════════════════

def administrator_only_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    """Catalog mutations are reserved for the administrator."""
    if command.command_type not in ADMIN_COMMAND_TYPES:
        return None

    if command.actor_id != context.administrator_id:
        return RejectionReason(
            code=ReasonCode.UNAUTHORIZED,
            message=MSG_UNAUTHORIZED,
            policy_name="administrator_only_policy",
        )

    return None


# ══════════════════════════════════════════════════════════════
# CATALOG ARGUMENTS
# ══════════════════════════════════════════════════════════════

def product_name_required_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    if command.command_type != STORE_PRODUCT_ADD_REQUEST:
        return None

    if not command.payload.get("name"):
        return RejectionReason(
            code=ReasonCode.INVALID_ARGUMENT,
            message=MSG_NAME_REQUIRED,
            policy_name="product_name_required_policy",
        )

    return None


def initial_quantity_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    """New products start with at least one unit."""
    if command.command_type != STORE_PRODUCT_ADD_REQUEST:
        return None

    if command.payload.get("quantity", 0) <= 0:
        return RejectionReason(
            code=ReasonCode.INVALID_ARGUMENT,
            message=MSG_QUANTITY_ZERO,
            policy_name="initial_quantity_policy",
        )

    return None


def product_exists_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    if command.command_type not in (
        STORE_PRODUCT_QUANTITY_UPDATE_REQUEST,
        STORE_PRODUCT_BUY_REQUEST,
    ):
        return None

    if context.get_product(command.payload.get("product_id")) is None:
        return RejectionReason(
            code=ReasonCode.NOT_FOUND,
            message=MSG_PRODUCT_NOT_FOUND,
            policy_name="product_exists_policy",
        )

    return None


def non_negative_quantity_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    """Quantity updates may set zero but never a negative count."""
    if command.command_type != STORE_PRODUCT_QUANTITY_UPDATE_REQUEST:
        return None

    if command.payload.get("new_quantity", 0) < 0:
        return RejectionReason(
            code=ReasonCode.INVALID_ARGUMENT,
            message=MSG_QUANTITY_NEGATIVE,
            policy_name="non_negative_quantity_policy",
        )

    return None


# ══════════════════════════════════════════════════════════════
# PURCHASES
# ══════════════════════════════════════════════════════════════

def in_stock_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    """
    A depleted product rejects every buyer, including ones who never
    bought it, so stock is checked before the buyer's own records.
    """
    if command.command_type != STORE_PRODUCT_BUY_REQUEST:
        return None

    product = context.get_product(command.payload.get("product_id"))
    if product is not None and product.quantity <= 0:
        return RejectionReason(
            code=ReasonCode.OUT_OF_STOCK,
            message=MSG_QUANTITY_ZERO,
            policy_name="in_stock_policy",
        )

    return None


def duplicate_purchase_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    if command.command_type != STORE_PRODUCT_BUY_REQUEST:
        return None

    purchase = context.get_purchase(
        command.payload.get("product_id"), command.actor_id
    )
    if purchase is not None and purchase.active:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_PURCHASE,
            message=MSG_DUPLICATE_PURCHASE,
            policy_name="duplicate_purchase_policy",
        )

    return None


# ══════════════════════════════════════════════════════════════
# REFUNDS
# ══════════════════════════════════════════════════════════════

def active_purchase_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    if command.command_type != STORE_PRODUCT_REFUND_REQUEST:
        return None

    purchase = context.get_purchase(
        command.payload.get("product_id"), command.actor_id
    )
    if purchase is None or not purchase.active:
        return RejectionReason(
            code=ReasonCode.NO_ACTIVE_PURCHASE,
            message=MSG_NO_ACTIVE_PURCHASE,
            policy_name="active_purchase_policy",
        )

    return None


def refund_window_policy(
    command: Command,
    context,
) -> Optional[RejectionReason]:
    """Refunds are honoured while at most refund_window_ticks have elapsed."""
    if command.command_type != STORE_PRODUCT_REFUND_REQUEST:
        return None

    purchase = context.get_purchase(
        command.payload.get("product_id"), command.actor_id
    )
    if purchase is None:
        return None

    if is_expired(
        purchase.purchased_at_tick,
        context.refund_window_ticks,
        context.current_tick(),
    ):
        return RejectionReason(
            code=ReasonCode.REFUND_WINDOW_EXPIRED,
            message=MSG_REFUND_DENIED,
            policy_name="refund_window_policy",
        )

    return None


STORE_POLICIES = (
    administrator_only_policy,
    product_name_required_policy,
    initial_quantity_policy,
    product_exists_policy,
    non_negative_quantity_policy,
    in_stock_policy,
    duplicate_purchase_policy,
    active_purchase_policy,
    refund_window_policy,
)
