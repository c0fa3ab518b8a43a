"""
Store Command Layer — Tests
==============================
Tests for the Command → Outcome → Result chain.

Scenarios:
1. Valid command → ACCEPTED
2. Invalid structure → validation error
3. Policy failure → REJECTED outcome
4. Rejected commands never reach a handler
5. Policy order: first rejection wins
6. Bus admission hook and handler registration
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

import pytest

from core.commands.base import (
    Command,
    derive_rejection_event_type,
    derive_source_engine,
)
from core.commands.outcomes import CommandOutcome, CommandStatus
from core.commands.rejection import RejectionReason, ReasonCode
from core.commands.validator import (
    CommandValidationError,
    validate_command,
)
from core.commands.dispatcher import CommandDispatcher
from core.commands.bus import (
    CommandBus,
    CommandResult,
    NoHandlerRegistered,
)


COMMAND_TYPE = "store.product.buy.request"


# ══════════════════════════════════════════════════════════════
# TEST INFRASTRUCTURE — STUBS
# ══════════════════════════════════════════════════════════════

class StubContext:
    """Stub matching CommandContextProtocol."""

    def __init__(self, tick: int = 10, supported: Optional[set] = None):
        self.tick = tick
        self._supported = supported if supported is not None else {COMMAND_TYPE}

    def supports_command_type(self, command_type: str) -> bool:
        return command_type in self._supported

    def current_tick(self) -> int:
        return self.tick


class StubEngineService:
    """Stub engine service that records execute calls."""

    def __init__(self, return_value: Any = "executed"):
        self.executed_commands = []
        self.return_value = return_value

    def execute(self, command: Command) -> Any:
        self.executed_commands.append(command)
        return self.return_value


class StubAdmissionListener:
    def __init__(self):
        self.admitted = 0

    def on_operation_admitted(self) -> None:
        self.admitted += 1


def make_command(**overrides) -> Command:
    fields = dict(
        command_id=uuid.uuid4(),
        command_type=COMMAND_TYPE,
        actor_id="0xbuyer",
        payload={"product_id": 0},
        issued_at_tick=5,
        correlation_id=uuid.uuid4(),
        source_engine="store",
    )
    fields.update(overrides)
    return Command(**fields)


def always_reject(code: str, policy_name: str):
    def policy(command, context):
        return RejectionReason(
            code=code, message=f"{policy_name} says no", policy_name=policy_name,
        )
    policy.__qualname__ = policy_name
    return policy


# ══════════════════════════════════════════════════════════════
# FIXTURES
# ══════════════════════════════════════════════════════════════

@pytest.fixture
def context():
    return StubContext()


@pytest.fixture
def valid_command():
    return make_command()


@pytest.fixture
def dispatcher(context):
    return CommandDispatcher(context=context)


@pytest.fixture
def engine_service():
    return StubEngineService()


@pytest.fixture
def listener():
    return StubAdmissionListener()


@pytest.fixture
def command_bus(dispatcher, listener):
    return CommandBus(dispatcher=dispatcher, admission_listener=listener)


# ══════════════════════════════════════════════════════════════
# 1. VALID COMMAND → ACCEPTED
# ══════════════════════════════════════════════════════════════

class TestValidCommandAccepted:

    def test_valid_command_accepted(self, dispatcher, valid_command):
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.is_accepted
        assert outcome.status == CommandStatus.ACCEPTED
        assert outcome.reason is None
        assert outcome.command_id == valid_command.command_id

    def test_outcome_stamped_with_current_tick(
        self, dispatcher, context, valid_command
    ):
        context.tick = 42
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.occurred_at_tick == 42

    def test_bus_accepted_calls_handler(
        self, command_bus, engine_service, valid_command
    ):
        command_bus.register_handler(COMMAND_TYPE, engine_service)
        result = command_bus.handle(valid_command)
        assert result.is_accepted
        assert result.execution_result == "executed"
        assert engine_service.executed_commands == [valid_command]


# ══════════════════════════════════════════════════════════════
# 2. INVALID STRUCTURE
# ══════════════════════════════════════════════════════════════

class TestInvalidStructure:

    def test_command_type_without_request_suffix(self):
        with pytest.raises(ValueError, match=".request"):
            make_command(command_type="store.product.bought")

    def test_command_type_too_few_segments(self):
        with pytest.raises(ValueError, match="engine.domain.action.request"):
            make_command(command_type="store.buy.request")

    def test_namespace_must_match_source_engine(self):
        with pytest.raises(ValueError, match="does not match"):
            make_command(command_type="inventory.product.buy.request")

    def test_non_string_actor_id(self):
        with pytest.raises(ValueError, match="actor_id"):
            make_command(actor_id=None)

    def test_empty_actor_id_left_to_policies(self):
        assert make_command(actor_id="").actor_id == ""

    def test_negative_tick(self):
        with pytest.raises(ValueError, match="issued_at_tick"):
            make_command(issued_at_tick=-1)

    def test_payload_not_dict(self):
        with pytest.raises(TypeError, match="payload"):
            make_command(payload="not a dict")

    def test_command_is_frozen(self, valid_command):
        with pytest.raises(AttributeError):
            valid_command.command_type = "hacked"

    def test_validator_rejects_non_command(self, context):
        with pytest.raises(CommandValidationError) as exc_info:
            validate_command({"command_type": COMMAND_TYPE}, context)
        assert exc_info.value.code == ReasonCode.INVALID_COMMAND_STRUCTURE

    def test_validator_rejects_unsupported_type(self, valid_command):
        with pytest.raises(CommandValidationError) as exc_info:
            validate_command(valid_command, StubContext(supported=set()))
        assert exc_info.value.code == ReasonCode.INVALID_COMMAND_TYPE

    def test_validator_rejects_future_tick(self, valid_command):
        with pytest.raises(CommandValidationError, match="ahead"):
            validate_command(valid_command, StubContext(tick=1))

    def test_validation_failure_becomes_rejection(self, valid_command):
        dispatcher = CommandDispatcher(context=StubContext(supported=set()))
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.is_rejected
        assert outcome.reason.policy_name == "command_validator"


# ══════════════════════════════════════════════════════════════
# 3. POLICY FAILURE → REJECTED
# ══════════════════════════════════════════════════════════════

class TestPolicyRejection:

    def test_policy_rejects(self, dispatcher, valid_command):
        dispatcher.register_policy(
            always_reject(ReasonCode.OUT_OF_STOCK, "stock_policy")
        )
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.is_rejected
        assert outcome.reason.code == ReasonCode.OUT_OF_STOCK

    def test_first_rejection_wins(self, dispatcher, valid_command):
        dispatcher.register_policy(lambda command, context: None)
        dispatcher.register_policy(
            always_reject(ReasonCode.NOT_FOUND, "first")
        )
        dispatcher.register_policy(
            always_reject(ReasonCode.OUT_OF_STOCK, "second")
        )
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.reason.policy_name == "first"

    def test_policy_must_return_reason(self, dispatcher, valid_command):
        dispatcher.register_policy(lambda command, context: "nope")
        with pytest.raises(TypeError, match="RejectionReason"):
            dispatcher.dispatch(valid_command)

    def test_non_callable_policy(self, dispatcher):
        with pytest.raises(TypeError, match="callable"):
            dispatcher.register_policy("not a policy")

    def test_rejection_reason_requires_message(self):
        with pytest.raises(ValueError, match="message"):
            RejectionReason(code="X", message="", policy_name="p")

    def test_rejection_reason_to_dict(self):
        reason = RejectionReason(code="X", message="m", policy_name="p")
        assert reason.to_dict() == {"code": "X", "message": "m", "policy_name": "p"}


# ══════════════════════════════════════════════════════════════
# 4. REJECTED NEVER EXECUTES
# ══════════════════════════════════════════════════════════════

class TestRejectedPath:

    def test_rejected_command_skips_handler(
        self, command_bus, dispatcher, engine_service, valid_command
    ):
        command_bus.register_handler(COMMAND_TYPE, engine_service)
        dispatcher.register_policy(
            always_reject(ReasonCode.DUPLICATE_PURCHASE, "dup")
        )

        result = command_bus.handle(valid_command)

        assert result.is_rejected
        assert result.reason.code == ReasonCode.DUPLICATE_PURCHASE
        assert result.rejection_event_type == "store.product.buy.rejected"
        assert engine_service.executed_commands == []

    def test_rejected_without_handler_still_returns(
        self, command_bus, dispatcher, valid_command
    ):
        dispatcher.register_policy(always_reject("X", "p"))
        result = command_bus.handle(valid_command)
        assert isinstance(result, CommandResult)
        assert result.is_rejected


# ══════════════════════════════════════════════════════════════
# 5. OUTCOME INVARIANTS
# ══════════════════════════════════════════════════════════════

class TestOutcomeInvariants:

    def test_rejected_requires_reason(self):
        with pytest.raises(ValueError, match="No silent rejections"):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.REJECTED,
                reason=None,
                occurred_at_tick=0,
            )

    def test_accepted_forbids_reason(self):
        with pytest.raises(ValueError, match="must NOT"):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.ACCEPTED,
                reason=RejectionReason(code="X", message="m", policy_name="p"),
                occurred_at_tick=0,
            )


# ══════════════════════════════════════════════════════════════
# 6. BUS ORCHESTRATION
# ══════════════════════════════════════════════════════════════

class TestCommandBus:

    def test_accepted_without_handler_raises(self, command_bus, valid_command):
        with pytest.raises(NoHandlerRegistered):
            command_bus.handle(valid_command)

    def test_every_handled_command_is_admitted(
        self, command_bus, dispatcher, engine_service, listener
    ):
        command_bus.register_handler(COMMAND_TYPE, engine_service)
        command_bus.handle(make_command())
        dispatcher.register_policy(always_reject("X", "p"))
        command_bus.handle(make_command())
        assert listener.admitted == 2

    def test_register_handler_requires_request_suffix(
        self, command_bus, engine_service
    ):
        with pytest.raises(ValueError, match=".request"):
            command_bus.register_handler("store.product.bought", engine_service)

    def test_register_handler_requires_execute(self, command_bus):
        with pytest.raises(TypeError, match="execute"):
            command_bus.register_handler(COMMAND_TYPE, object())

    def test_has_handler(self, command_bus, engine_service):
        assert not command_bus.has_handler(COMMAND_TYPE)
        command_bus.register_handler(COMMAND_TYPE, engine_service)
        assert command_bus.has_handler(COMMAND_TYPE)


# ══════════════════════════════════════════════════════════════
# NAMING HELPERS
# ══════════════════════════════════════════════════════════════

class TestNamingHelpers:

    def test_derive_rejection_event_type(self):
        assert (
            derive_rejection_event_type("store.product.refund.request")
            == "store.product.refund.rejected"
        )

    def test_derive_rejection_requires_request_suffix(self):
        with pytest.raises(ValueError):
            derive_rejection_event_type("store.product.refunded")

    def test_derive_source_engine(self):
        assert derive_source_engine("store.product.add.request") == "store"
