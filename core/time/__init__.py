"""
Store Core Time — Public API
==============================
Externally advanced tick counter and tick window helpers.
Doctrine: NO wall-clock time in engine logic.
"""

from core.time.ticks import (
    AutoMiningTickCounter,
    ManualTickCounter,
    TickCounter,
)
from core.time.temporal import (
    TickWindow,
    elapsed_ticks,
    is_expired,
    ticks_until_expiry,
)

__all__ = [
    "TickCounter",
    "ManualTickCounter",
    "AutoMiningTickCounter",
    "TickWindow",
    "elapsed_ticks",
    "is_expired",
    "ticks_until_expiry",
]
