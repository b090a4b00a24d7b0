"""Reporter Protocol: interface for reporting dispatched actions."""

from typing import Protocol, runtime_checkable

from rtp_core.schema.action import ActionResult, ConfirmedAction
from rtp_core.schema.actor import Actor


@runtime_checkable
class Reporter(Protocol):
    """
    Standard interface for outcome reporting.
    Implementations can be a console logger, an audit table or a chat transcript.
    """

    def emit(self, action: ConfirmedAction, actor: Actor, result: ActionResult) -> None:
        """Called by the dispatcher once per dispatched action."""
        ...
