"""
Store Command Layer — Command Bus
===================================
High-level orchestration of the command lifecycle.

Flow:
    1. Notify tick source that an operation was admitted
    2. Dispatch command → get Outcome
    3. If ACCEPTED → call engine service handler → handler applies event
    4. If REJECTED → return the structured rejection, nothing executes

The CommandBus:
- Orchestrates, does not decide
- Delegates accepted commands to engine service handlers
- Guarantees: no silent path, every command produces a traceable result

The CommandBus does NOT:
- Touch engine state directly
- Retry rejected commands
- Contain engine-specific logic
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from core.commands.base import Command, derive_rejection_event_type
from core.commands.dispatcher import CommandDispatcher
from core.commands.outcomes import CommandOutcome

logger = logging.getLogger("store.commands")


# ══════════════════════════════════════════════════════════════
# ENGINE SERVICE PROTOCOL
# ══════════════════════════════════════════════════════════════

class EngineServiceProtocol(Protocol):
    """
    Protocol for engine service handlers.

    Each engine registers a handler that knows how to execute
    an accepted command and apply the resulting event.
    """

    def execute(self, command: Command) -> Any:
        """Execute accepted command. Engine applies its own event."""
        ...


class AdmissionListener(Protocol):
    """Substrate hook told about every operation the bus admits."""

    def on_operation_admitted(self) -> None:
        ...


# ══════════════════════════════════════════════════════════════
# COMMAND BUS ERRORS
# ══════════════════════════════════════════════════════════════

class CommandBusError(Exception):
    """Base error for command bus operations."""
    pass


class NoHandlerRegistered(CommandBusError):
    """No engine service handler registered for command type."""

    def __init__(self, command_type: str):
        self.command_type = command_type
        super().__init__(
            f"No engine service handler registered for "
            f"command type '{command_type}'."
        )


# ══════════════════════════════════════════════════════════════
# COMMAND BUS RESULT
# ══════════════════════════════════════════════════════════════

class CommandResult:
    """
    Result of CommandBus.handle() — wraps outcome + execution result.
    """

    def __init__(
        self,
        outcome: CommandOutcome,
        execution_result: Any = None,
        rejection_event_type: Optional[str] = None,
    ):
        self.outcome = outcome
        self.execution_result = execution_result
        self.rejection_event_type = rejection_event_type

    @property
    def is_accepted(self) -> bool:
        return self.outcome.is_accepted

    @property
    def is_rejected(self) -> bool:
        return self.outcome.is_rejected

    @property
    def reason(self):
        return self.outcome.reason


# ══════════════════════════════════════════════════════════════
# COMMAND BUS
# ══════════════════════════════════════════════════════════════

class CommandBus:
    """
    Orchestration layer for command lifecycle.

    Usage:
        bus = CommandBus(dispatcher=dispatcher, admission_listener=ticks)

        bus.register_handler("store.product.buy.request", store_handler)

        result = bus.handle(command)
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        admission_listener: Optional[AdmissionListener] = None,
    ):
        self._dispatcher = dispatcher
        self._admission_listener = admission_listener
        self._handlers: Dict[str, Any] = {}

    # ══════════════════════════════════════════════════════════
    # HANDLER REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register_handler(
        self,
        command_type: str,
        handler: Any,
    ) -> None:
        """
        Register engine service handler for a command type.

        Handler must implement EngineServiceProtocol (have .execute()).
        """
        if not command_type.endswith(".request"):
            raise ValueError(
                f"command_type '{command_type}' must end with '.request'."
            )

        if not hasattr(handler, "execute") or not callable(handler.execute):
            raise TypeError(
                "Handler must have callable .execute() method."
            )

        self._handlers[command_type] = handler
        logger.info(f"Handler registered: {command_type}")

    def has_handler(self, command_type: str) -> bool:
        return command_type in self._handlers

    # ══════════════════════════════════════════════════════════
    # HANDLE (main orchestration)
    # ══════════════════════════════════════════════════════════

    def handle(self, command: Command) -> CommandResult:
        """
        Full command lifecycle:

        1. Admit → the substrate may advance its tick counter
        2. Dispatch → get Outcome (ACCEPTED/REJECTED)
        3. ACCEPTED → verify handler exists → execute
        4. REJECTED → return reason, no execution

        No silent paths. Every command produces a traceable result.
        """
        if self._admission_listener is not None:
            self._admission_listener.on_operation_admitted()

        outcome = self._dispatcher.dispatch(command)

        if outcome.is_accepted:
            return self._handle_accepted(command, outcome)
        else:
            return self._handle_rejected(command, outcome)

    # ══════════════════════════════════════════════════════════
    # ACCEPTED PATH
    # ══════════════════════════════════════════════════════════

    def _handle_accepted(
        self, command: Command, outcome: CommandOutcome
    ) -> CommandResult:
        handler = self._handlers.get(command.command_type)
        if handler is None:
            raise NoHandlerRegistered(command.command_type)

        logger.info(
            f"Executing accepted command {command.command_id} "
            f"({command.command_type})"
        )

        execution_result = handler.execute(command)

        return CommandResult(
            outcome=outcome,
            execution_result=execution_result,
        )

    # ══════════════════════════════════════════════════════════
    # REJECTED PATH
    # ══════════════════════════════════════════════════════════

    def _handle_rejected(
        self, command: Command, outcome: CommandOutcome
    ) -> CommandResult:
        """
        Rejected commands never reach a handler.

        Event type derivation:
            store.product.buy.request → store.product.buy.rejected
        """
        rejection_event_type = derive_rejection_event_type(
            command.command_type
        )

        logger.info(
            f"Command {command.command_id} rejected: "
            f"{rejection_event_type} (reason: {outcome.reason.code})"
        )

        return CommandResult(
            outcome=outcome,
            rejection_event_type=rejection_event_type,
        )
