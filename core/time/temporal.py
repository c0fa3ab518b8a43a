"""
Store Core Time — Tick Window Helpers
=======================================
Pure functions for tick interval logic.
All functions take explicit tick arguments — no hidden counter access.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# ══════════════════════════════════════════════════════════════
# TICK WINDOW — Closed interval [start, end]
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TickWindow:
    """
    A closed tick interval [start, end].

    Invariant: start <= end (enforced at construction).
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"TickWindow start ({self.start}) must be <= end ({self.end})."
            )

    @classmethod
    def following(cls, start: int, length: int) -> TickWindow:
        """Window opening at `start` and lasting `length` ticks."""
        return cls(start=start, end=start + length)

    def contains(self, tick: int) -> bool:
        """Check if tick falls within window (inclusive)."""
        return self.start <= tick <= self.end

    def duration(self) -> int:
        return self.end - self.start


# ══════════════════════════════════════════════════════════════
# PURE TEMPORAL FUNCTIONS
# ══════════════════════════════════════════════════════════════

def elapsed_ticks(stamped_at: int, now: int) -> int:
    """Ticks between a stamp and now. Counters are monotonic."""
    if now < stamped_at:
        raise ValueError(
            f"Current tick {now} is behind stamped tick {stamped_at}."
        )
    return now - stamped_at


def is_expired(stamped_at: int, window_ticks: int, now: int) -> bool:
    """
    Check if something stamped at `stamped_at` has outlived its window.

    Exactly `window_ticks` elapsed is still inside the window.
    """
    return elapsed_ticks(stamped_at, now) > window_ticks


def ticks_until_expiry(
    stamped_at: int, window_ticks: int, now: int
) -> Optional[int]:
    """
    Return ticks remaining inside the window, or None if already expired.

    Zero means `now` is the last tick the window still covers.
    """
    remaining = window_ticks - elapsed_ticks(stamped_at, now)
    return remaining if remaining >= 0 else None
