from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger

from rtp_core.errors import GateStateError
from rtp_core.logging_utils import log_event
from rtp_core.protocols.controller import BaseChatController
from rtp_core.schema.action import ActionResult, ProposedAction
from rtp_core.schema.request import ImageBlob

from .client import AssistantAPIClient, AssistantAPIError
from .gate import ConfirmationGate, GateState
from .reporter import ChatMessage, ChatTranscriptReporter


class AssistantChatController(BaseChatController):
    """
    Client-side flow of the assistant chat.

    A message goes to the server for a proposal; a proposal parks in the
    gate until the operator confirms or cancels. Confirming re-sends the
    captured action, never anything re-derived.
    """

    def __init__(
        self,
        client: AssistantAPIClient,
        *,
        gate: ConfirmationGate | None = None,
        reporter: ChatTranscriptReporter | None = None,
    ):
        super().__init__(client=client)
        self.gate = gate or ConfirmationGate()
        self.reporter = reporter or ChatTranscriptReporter()

    @property
    def messages(self) -> list[ChatMessage]:
        return self.reporter.messages

    @property
    def input_enabled(self) -> bool:
        return not self.gate.is_busy

    async def handle_send(self, text: str, images: Sequence[ImageBlob] = ()) -> Optional[dict]:
        if self.gate.is_busy:
            raise GateStateError("An action is still executing; wait for it to finish.")
        if not (text or "").strip() and not images:
            return None

        self.reporter.user(text, images=[image.data for image in images])
        try:
            data = await self.client.propose(text, images)
        except AssistantAPIError as exc:
            logger.warning(log_event("assistant.chat.propose_failed", status=exc.status_code, error=exc.message))
            self.reporter.request_failed(exc)
            return None

        kind = data.get("type")
        if kind == "function_call":
            action = ProposedAction(name=data["function"], arguments=data.get("arguments") or {})
            preview = str(data.get("message") or "")
            pending = self.gate.propose(action, preview, signature=data.get("signature"))
            self.reporter.proposal(pending.action, preview)
        else:
            self.reporter.text(str(data.get("message") or ""))
        return data

    async def confirm(self) -> Optional[ActionResult]:
        if self.gate.state is not GateState.PROPOSED:
            raise GateStateError("There is no pending action to confirm.")

        in_flight = self.gate.confirm()
        try:
            result = await self.client.execute(in_flight.action, in_flight.signature)
        except AssistantAPIError as exc:
            logger.warning(
                log_event("assistant.chat.execute_failed", function=in_flight.action.name, error=exc.message)
            )
            self.gate.fail()
            self.reporter.execution_failed(exc)
            return None

        if result.ok:
            self.gate.complete()
            self.reporter.success(result)
        else:
            self.gate.fail()
            self.reporter.execution_failed(AssistantAPIError(status_code=200, message=result.message))
        return result

    def cancel(self) -> None:
        if self.gate.state is not GateState.PROPOSED:
            raise GateStateError("There is no pending action to cancel.")
        self.gate.cancel()
        self.reporter.cancelled()
