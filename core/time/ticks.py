"""
Store Core Time — Tick Counter Protocol
=========================================
Doctrine: NO wall-clock time inside engine logic.
Deadlines are measured in ticks of an externally advanced,
monotonic counter. Engines only read it; the substrate advances it.

The reference ledger advances one tick per admitted operation
(each transaction lands in its own block). Tests drive the
counter explicitly to simulate elapsed ticks.
"""

from __future__ import annotations

from typing import Protocol


# ══════════════════════════════════════════════════════════════
# TICK COUNTER PROTOCOL
# ══════════════════════════════════════════════════════════════

class TickCounter(Protocol):
    """Injectable tick source. Engines only read it."""

    def current_tick(self) -> int:
        """Return the current counter value."""
        ...  # pragma: no cover

    def on_operation_admitted(self) -> None:
        """Called by the command bus before each operation it admits."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class ManualTickCounter:
    """
    Tick counter advanced only by explicit calls.

    Usage:
        ticks = ManualTickCounter()
        ticks.advance(101)
        assert ticks.current_tick() == 101
    """

    def __init__(self, start: int = 0) -> None:
        if isinstance(start, bool) or not isinstance(start, int) or start < 0:
            raise ValueError("Tick counter start must be a non-negative integer.")
        self._tick = start

    def current_tick(self) -> int:
        return self._tick

    def advance(self, ticks: int = 1) -> int:
        """Move the counter forward. Counters never run backwards."""
        if isinstance(ticks, bool) or not isinstance(ticks, int) or ticks < 0:
            raise ValueError("Ticks to advance must be a non-negative integer.")
        self._tick += ticks
        return self._tick

    def on_operation_admitted(self) -> None:
        """Manual counters ignore admissions."""
        return None


class AutoMiningTickCounter(ManualTickCounter):
    """
    Counter that advances once per admitted operation, the way an
    auto-mining ledger puts every transaction in a fresh block.
    """

    def on_operation_admitted(self) -> None:
        self.advance(1)

