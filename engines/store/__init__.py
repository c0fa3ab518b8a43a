"""
Store Engine — Public API
===========================
Administrator-controlled catalog, one-unit purchases, tick-bounded refunds.
"""

from engines.store.errors import (
    DuplicatePurchase,
    InvalidArgument,
    InvalidCommand,
    NoActivePurchase,
    OutOfStock,
    ProductNotFound,
    RefundWindowExpired,
    StoreError,
    Unauthorized,
)
from engines.store.facade import Store
from engines.store.services import ProductView, PurchaseRecord

__all__ = [
    "Store",
    "ProductView",
    "PurchaseRecord",
    "StoreError",
    "Unauthorized",
    "InvalidArgument",
    "ProductNotFound",
    "OutOfStock",
    "DuplicatePurchase",
    "NoActivePurchase",
    "RefundWindowExpired",
    "InvalidCommand",
]
