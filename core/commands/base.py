"""
Store Command Layer — Command Base Contract
=============================================
Every store operation begins as a Command.

A Command is a frozen, auditable declaration of caller intent.
It carries identity, the tick it was issued at, and payload — nothing else.

Rules:
- Immutable once created (frozen dataclass)
- No business logic inside
- No state access
- No event emission
- command_type must end with '.request'
- command_type follows engine.domain.action.request format

A Command is NOT an event. It is intent awaiting judgment.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# CANONICAL COMMAND
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Command:
    """
    Canonical store Command — declaration of caller intent.

    Fields:
        command_id:     Unique identifier (UUID).
        command_type:   Namespaced type ending in '.request'
                        (e.g. 'store.product.buy.request').
        actor_id:       Opaque caller identity, authenticated upstream.
        payload:        Operation arguments (dict).
        issued_at_tick: Tick counter value when the command was issued.
        correlation_id: Groups related commands/events in a story.
        source_engine:  Engine that owns this command.

    Example:
        Command(
            command_id=uuid.uuid4(),
            command_type="store.product.buy.request",
            actor_id="0xbuyer",
            payload={"product_id": 0},
            issued_at_tick=12,
            correlation_id=uuid.uuid4(),
            source_engine="store",
        )
    """

    command_id: uuid.UUID
    command_type: str
    actor_id: str
    payload: dict
    issued_at_tick: int
    correlation_id: uuid.UUID
    source_engine: str

    def __post_init__(self):
        # ── command_id must be UUID ───────────────────────────
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError(
                f"command_id must be UUID, got {type(self.command_id).__name__}"
            )

        # ── command_type must end with .request ───────────────
        if not self.command_type or not isinstance(self.command_type, str):
            raise ValueError("command_type must be a non-empty string.")

        if not self.command_type.endswith(".request"):
            raise ValueError(
                f"command_type '{self.command_type}' must end with "
                f"'.request' (e.g. 'store.product.buy.request')."
            )

        # ── command_type minimum 4 segments ───────────────────
        parts = self.command_type.split(".")
        if len(parts) < 4:
            raise ValueError(
                f"command_type '{self.command_type}' must follow "
                f"engine.domain.action.request format (minimum 4 segments)."
            )

        # ── source_engine must match first segment ────────────
        if parts[0] != self.source_engine:
            raise ValueError(
                f"command_type namespace '{parts[0]}' does not match "
                f"source_engine '{self.source_engine}'."
            )

        # ── actor_id must be a string (opaque; policies judge it) ─
        if not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a string.")

        # ── issued_at_tick must be a non-negative int ─────────
        if (
            isinstance(self.issued_at_tick, bool)
            or not isinstance(self.issued_at_tick, int)
            or self.issued_at_tick < 0
        ):
            raise ValueError("issued_at_tick must be a non-negative integer.")

        # ── payload must be dict ──────────────────────────────
        if not isinstance(self.payload, dict):
            raise TypeError("payload must be a dict.")

        # ── correlation_id must be UUID ───────────────────────
        if not isinstance(self.correlation_id, uuid.UUID):
            raise ValueError("correlation_id must be UUID.")


# ══════════════════════════════════════════════════════════════
# EVENT NAMING LAW (derivation helpers)
# ══════════════════════════════════════════════════════════════

def derive_rejection_event_type(command_type: str) -> str:
    """
    Derive rejected event type from command type.

    store.product.buy.request → store.product.buy.rejected

    Rule: Strip '.request', append '.rejected'.
    """
    if not command_type.endswith(".request"):
        raise ValueError(
            f"Cannot derive rejection event type from "
            f"'{command_type}' — must end with '.request'."
        )

    base = command_type[: -len(".request")]
    return f"{base}.rejected"


def derive_source_engine(command_type: str) -> str:
    """
    Extract source engine from command type.

    store.product.buy.request → store
    """
    return command_type.split(".")[0]
