"""
Store Engine — Errors
=======================
Exceptions raised by the Store facade.

Each error mirrors one rejection code and carries the verbatim
rejection message. Callers match on the class, the code or the text.
"""

from __future__ import annotations

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason


class StoreError(Exception):
    """Base error for rejected store operations."""

    code: str = "STORE_ERROR"

    def __init__(self, message: str, policy_name: Optional[str] = None):
        self.message = message
        self.policy_name = policy_name
        super().__init__(message)


class Unauthorized(StoreError):
    """Caller is not the administrator."""
    code = ReasonCode.UNAUTHORIZED


class InvalidArgument(StoreError):
    """Malformed operation argument."""
    code = ReasonCode.INVALID_ARGUMENT


class ProductNotFound(StoreError):
    """No catalog entry for the requested product."""
    code = ReasonCode.NOT_FOUND


class OutOfStock(StoreError):
    """Product quantity is zero."""
    code = ReasonCode.OUT_OF_STOCK


class DuplicatePurchase(StoreError):
    """Caller already holds an active purchase of the product."""
    code = ReasonCode.DUPLICATE_PURCHASE


class NoActivePurchase(StoreError):
    """Nothing to refund: never bought, or already returned."""
    code = ReasonCode.NO_ACTIVE_PURCHASE


class RefundWindowExpired(StoreError):
    """Refund requested after the refund window closed."""
    code = ReasonCode.REFUND_WINDOW_EXPIRED


class InvalidCommand(StoreError):
    """Command failed structural validation."""
    code = ReasonCode.INVALID_COMMAND_STRUCTURE


_ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        Unauthorized,
        InvalidArgument,
        ProductNotFound,
        OutOfStock,
        DuplicatePurchase,
        NoActivePurchase,
        RefundWindowExpired,
        InvalidCommand,
    )
}
_ERRORS_BY_CODE[ReasonCode.INVALID_COMMAND_TYPE] = InvalidCommand


def error_for_reason(reason: RejectionReason) -> StoreError:
    """Build the facade exception for a command rejection."""
    error_cls = _ERRORS_BY_CODE.get(reason.code, StoreError)
    return error_cls(reason.message, policy_name=reason.policy_name)
