"""
Store Command Layer — Governance
==================================
Every operation begins as a Command.
Every Command produces exactly one Outcome.
REJECTED commands carry a structured reason and never mutate state.
"""

from core.commands.base import (
    Command,
    derive_rejection_event_type,
    derive_source_engine,
)
from core.commands.outcomes import (
    CommandOutcome,
    CommandStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)
from core.commands.validator import (
    CommandContextProtocol,
    CommandValidationError,
    validate_command,
)
from core.commands.dispatcher import (
    CommandDispatcher,
    PolicyEvaluator,
)
from core.commands.bus import (
    CommandBus,
    CommandBusError,
    CommandResult,
    NoHandlerRegistered,
)

__all__ = [
    # ── Base ──────────────────────────────────────────────────
    "Command",
    "derive_rejection_event_type",
    "derive_source_engine",
    # ── Outcomes ──────────────────────────────────────────────
    "CommandOutcome",
    "CommandStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    # ── Validator ─────────────────────────────────────────────
    "CommandContextProtocol",
    "CommandValidationError",
    "validate_command",
    # ── Dispatcher ────────────────────────────────────────────
    "CommandDispatcher",
    "PolicyEvaluator",
    # ── Bus ────────────────────────────────────────────────────
    "CommandBus",
    "CommandBusError",
    "CommandResult",
    "NoHandlerRegistered",
]
