from loguru import logger

from rtp_core.logging_utils import log_event
from rtp_core.reporters.base import BaseReporter
from rtp_core.schema.action import ActionResult, ConfirmedAction
from rtp_core.schema.actor import Actor


class ConsoleReporter(BaseReporter):
    """Writes one structured log line per dispatched action."""

    def emit(self, action: ConfirmedAction, actor: Actor, result: ActionResult) -> None:
        fields = {
            "action": action.name,
            "actor": actor.email,
            "role": actor.role,
            "result": result.type,
        }
        if result.ok:
            logger.info(log_event("assistant.action.report", **fields, link=result.link))
        else:
            logger.warning(log_event("assistant.action.report", **fields, message=result.message))
