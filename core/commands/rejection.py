"""
Store Command Layer — Rejection Model
=======================================
Structured rejection reasons for denied commands.

Every rejection must be:
- Deterministic (same state + input → same rejection)
- Machine-readable (code)
- Human-readable (message, matched verbatim by callers)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for command rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'OUT_OF_STOCK').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        """Serialize for event payload / caller response."""
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Access control ────────────────────────────────────────
    UNAUTHORIZED = "UNAUTHORIZED"

    # ── Command structure ─────────────────────────────────────
    INVALID_COMMAND_STRUCTURE = "INVALID_COMMAND_STRUCTURE"
    INVALID_COMMAND_TYPE = "INVALID_COMMAND_TYPE"

    # ── Catalog ───────────────────────────────────────────────
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"

    # ── Purchase / refund ─────────────────────────────────────
    OUT_OF_STOCK = "OUT_OF_STOCK"
    DUPLICATE_PURCHASE = "DUPLICATE_PURCHASE"
    NO_ACTIVE_PURCHASE = "NO_ACTIVE_PURCHASE"
    REFUND_WINDOW_EXPIRED = "REFUND_WINDOW_EXPIRED"
