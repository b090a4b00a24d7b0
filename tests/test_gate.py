"""Tests for the confirmation gate state machine."""

import pytest

from rtp_core.errors import GateStateError
from rtp_core.schema.action import ProposedAction
from rtp_engines.assistant.gate import HISTORY_LIMIT, ConfirmationGate, GateState


def _action(slug: str) -> ProposedAction:
    return ProposedAction(name="delete_recipe", arguments={"slug": slug})


def test_confirm_returns_the_captured_action_and_runs_to_idle() -> None:
    gate = ConfirmationGate()
    gate.propose(_action("a"), "preview a")

    in_flight = gate.confirm()

    assert in_flight.action == _action("a")
    assert gate.state is GateState.EXECUTING
    assert gate.is_busy
    gate.complete()
    assert gate.state is GateState.IDLE
    assert gate.history == [
        GateState.IDLE,
        GateState.PROPOSED,
        GateState.CONFIRMED,
        GateState.EXECUTING,
        GateState.COMPLETED,
        GateState.IDLE,
    ]


def test_newer_proposal_replaces_pending_one() -> None:
    gate = ConfirmationGate()
    gate.propose(_action("old"), "old preview")
    gate.propose(_action("new"), "new preview")

    assert gate.pending.action.arguments == {"slug": "new"}
    assert gate.confirm().action.arguments == {"slug": "new"}


def test_captured_action_is_isolated_from_later_mutation() -> None:
    gate = ConfirmationGate()
    action = _action("a")
    gate.propose(action, "preview")

    action.arguments["slug"] = "b"

    assert gate.confirm().action.arguments == {"slug": "a"}


def test_cancel_drops_pending_action() -> None:
    gate = ConfirmationGate()
    gate.propose(_action("a"), "preview")

    dropped = gate.cancel()

    assert dropped.action.arguments == {"slug": "a"}
    assert gate.pending is None
    assert gate.state is GateState.IDLE
    assert gate.history[-2:] == [GateState.CANCELLED, GateState.IDLE]


def test_failure_rearms_the_gate() -> None:
    gate = ConfirmationGate()
    gate.propose(_action("a"), "preview")
    gate.confirm()

    gate.fail()

    assert gate.state is GateState.IDLE
    gate.propose(_action("b"), "preview")
    assert gate.state is GateState.PROPOSED


def test_illegal_transitions_raise() -> None:
    gate = ConfirmationGate()

    with pytest.raises(GateStateError):
        gate.confirm()
    with pytest.raises(GateStateError):
        gate.cancel()
    with pytest.raises(GateStateError):
        gate.complete()

    gate.propose(_action("a"), "preview")
    gate.confirm()
    with pytest.raises(GateStateError):
        gate.propose(_action("b"), "preview")
    with pytest.raises(GateStateError):
        gate.confirm()


def test_history_keeps_only_recent_transitions() -> None:
    gate = ConfirmationGate()
    for index in range(20):
        gate.propose(_action(str(index)), "preview")
        gate.confirm()
        gate.complete()

    assert len(gate.history) == HISTORY_LIMIT
    assert gate.history[-1] is GateState.IDLE
    assert gate.history[-2] is GateState.COMPLETED
