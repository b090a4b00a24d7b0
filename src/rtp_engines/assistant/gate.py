"""Confirmation gate: the client-held checkpoint between a proposal and its execution."""

from __future__ import annotations

import copy
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from rtp_core.errors import GateStateError
from rtp_core.logging_utils import log_event
from rtp_core.schema.action import ProposedAction

HISTORY_LIMIT = 16


class GateState(str, Enum):
    IDLE = "idle"
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[GateState, frozenset[GateState]] = {
    GateState.IDLE: frozenset({GateState.PROPOSED}),
    GateState.PROPOSED: frozenset({GateState.PROPOSED, GateState.CONFIRMED, GateState.CANCELLED}),
    GateState.CONFIRMED: frozenset({GateState.EXECUTING}),
    GateState.EXECUTING: frozenset({GateState.COMPLETED, GateState.FAILED}),
    GateState.CANCELLED: frozenset({GateState.IDLE}),
    GateState.COMPLETED: frozenset({GateState.IDLE}),
    GateState.FAILED: frozenset({GateState.IDLE}),
}


@dataclass(frozen=True)
class PendingAction:
    action: ProposedAction
    preview: str
    signature: Optional[str] = None


class ConfirmationGate:
    """
    Holds at most one pending action.

    IDLE -> PROPOSED -> CONFIRMED -> EXECUTING -> COMPLETED | FAILED -> IDLE
                     -> CANCELLED -> IDLE

    A newer proposal replaces the pending one. What `confirm()` returns is
    the copy captured at proposal time, never a re-derived value. There is
    no timeout on a pending proposal.
    """

    def __init__(self) -> None:
        self._state = GateState.IDLE
        self._pending: PendingAction | None = None
        self._in_flight: PendingAction | None = None
        self._history: deque[GateState] = deque([GateState.IDLE], maxlen=HISTORY_LIMIT)

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def history(self) -> list[GateState]:
        """Most recent transitions, oldest first."""
        return list(self._history)

    @property
    def pending(self) -> PendingAction | None:
        return self._pending

    @property
    def in_flight(self) -> PendingAction | None:
        return self._in_flight

    @property
    def is_busy(self) -> bool:
        return self._state is GateState.EXECUTING

    def _move(self, target: GateState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise GateStateError(f"Cannot go from {self._state.value} to {target.value}.")
        logger.debug(log_event("assistant.gate.transition", source=self._state.value, target=target.value))
        self._state = target
        self._history.append(target)

    def propose(self, action: ProposedAction, preview: str, signature: str | None = None) -> PendingAction:
        if self._pending is not None:
            logger.info(log_event("assistant.gate.superseded", dropped=self._pending.action.name, kept=action.name))
        self._move(GateState.PROPOSED)
        self._pending = PendingAction(action=action.model_copy(deep=True), preview=preview, signature=signature)
        return self._pending

    def confirm(self) -> PendingAction:
        self._move(GateState.CONFIRMED)
        captured, self._pending = self._pending, None
        self._in_flight = PendingAction(
            action=captured.action.model_copy(deep=True),
            preview=captured.preview,
            signature=captured.signature,
        )
        self._move(GateState.EXECUTING)
        return copy.deepcopy(self._in_flight)

    def cancel(self) -> PendingAction:
        self._move(GateState.CANCELLED)
        dropped, self._pending = self._pending, None
        self._move(GateState.IDLE)
        return dropped

    def complete(self) -> None:
        self._move(GateState.COMPLETED)
        self._in_flight = None
        self._move(GateState.IDLE)

    def fail(self) -> None:
        self._move(GateState.FAILED)
        self._in_flight = None
        self._move(GateState.IDLE)
