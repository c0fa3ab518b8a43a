"""
Store Core Config — Public API
================================
Construction-time store settings (administrator, refund window).
"""

from core.config.settings import (
    DEFAULT_REFUND_WINDOW_TICKS,
    ENV_ADMINISTRATOR_ID,
    ENV_REFUND_WINDOW_TICKS,
    SettingsError,
    StoreSettings,
)

__all__ = [
    "DEFAULT_REFUND_WINDOW_TICKS",
    "ENV_ADMINISTRATOR_ID",
    "ENV_REFUND_WINDOW_TICKS",
    "SettingsError",
    "StoreSettings",
]
