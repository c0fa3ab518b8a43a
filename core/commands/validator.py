"""
Store Command Layer — Command Validator
=========================================
Validates command structure against the executing context.

This validator does NOT:
- Emit events
- Mutate state
- Evaluate business policies
- Dispatch anything

It only checks:
- Command is a Command instance
- Context exposes the required interface
- command_type is supported by the context
- issued_at_tick is not ahead of the tick counter
- payload is a dict

If invalid → CommandValidationError (structured, auditable).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.commands.base import Command
from core.commands.rejection import ReasonCode


# ══════════════════════════════════════════════════════════════
# CONTEXT PROTOCOL (dependency injection)
# ══════════════════════════════════════════════════════════════

@runtime_checkable
class CommandContextProtocol(Protocol):
    """
    Context interface required by command validation.

    Engines pass their read-only state view here; policies receive
    the same object.
    """

    def supports_command_type(self, command_type: str) -> bool:
        """Is this command type handled by the context's engine?"""
        ...

    def current_tick(self) -> int:
        """Return the externally advanced tick counter value."""
        ...


# ══════════════════════════════════════════════════════════════
# VALIDATION ERRORS
# ══════════════════════════════════════════════════════════════

class CommandValidationError(Exception):
    """Structured validation failure for commands."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


# ══════════════════════════════════════════════════════════════
# VALIDATOR
# ══════════════════════════════════════════════════════════════

def validate_command(
    command: Command,
    context: CommandContextProtocol,
) -> None:
    """
    Validate command structure against context.

    Checks (in order):
    1. Command is a Command instance
    2. Context implements CommandContextProtocol
    3. command_type is supported
    4. issued_at_tick is not in the future
    5. payload is a dict

    Raises:
        CommandValidationError: If any check fails.

    Returns:
        None — success is silent. Failure is loud.
    """

    # ── 1. Type check ─────────────────────────────────────────
    if not isinstance(command, Command):
        raise CommandValidationError(
            code=ReasonCode.INVALID_COMMAND_STRUCTURE,
            message=f"Expected Command, got {type(command).__name__}.",
        )

    # ── 2. Context shape ──────────────────────────────────────
    if context is None or not isinstance(context, CommandContextProtocol):
        raise CommandValidationError(
            code=ReasonCode.INVALID_COMMAND_STRUCTURE,
            message="Context does not implement CommandContextProtocol.",
        )

    # ── 3. Supported command type ─────────────────────────────
    if not context.supports_command_type(command.command_type):
        raise CommandValidationError(
            code=ReasonCode.INVALID_COMMAND_TYPE,
            message=(
                f"Command type '{command.command_type}' is not supported."
            ),
        )

    # ── 4. Tick ordering ──────────────────────────────────────
    now = context.current_tick()
    if command.issued_at_tick > now:
        raise CommandValidationError(
            code=ReasonCode.INVALID_COMMAND_STRUCTURE,
            message=(
                f"Command issued at tick {command.issued_at_tick} "
                f"is ahead of the current tick {now}."
            ),
        )

    # ── 5. Payload ────────────────────────────────────────────
    if not isinstance(command.payload, dict):
        raise CommandValidationError(
            code=ReasonCode.INVALID_COMMAND_STRUCTURE,
            message="Command payload must be a dict.",
        )
