# src/rtp_core/reporters/base.py
from abc import ABC, abstractmethod

from rtp_core.schema.action import ActionResult, ConfirmedAction
from rtp_core.schema.actor import Actor


class BaseReporter(ABC):
    """
    Base class for dispatch reporters.
    Every reporter (console, chat transcript, ...) should inherit from it.
    """

    @abstractmethod
    def emit(self, action: ConfirmedAction, actor: Actor, result: ActionResult) -> None:
        """Report one dispatched action and its outcome."""
        pass
