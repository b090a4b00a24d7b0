"""Chat transcript reporter: every outcome becomes exactly one assistant message."""

from __future__ import annotations

import itertools
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from rtp_core.schema.action import ActionResult, ProposedAction

GREETING = (
    "👋 Hi! I'm your AI assistant. I can help you:\n\n"
    "• **Create or update recipes** - with ingredients, instructions, and images\n"
    "• **Add or edit products** - set pricing, categories, and stock\n"
    "• **Remove recipes or products** - always with a preview first\n"
    "• **Approve users** - manage roles and permissions (admin only)\n"
    "• **Update inventory** - adjust stock quantities\n\n"
    "Just describe what you need in natural language, and I'll take care of the rest!"
)
CANCELLED_MESSAGE = "No problem! Is there anything else I can help you with?"


class ChatMessage(BaseModel):
    id: str
    type: Literal["user", "assistant"]
    content: str
    images: list[str] = Field(default_factory=list)
    function_call: Optional[dict[str, Any]] = None
    link: Optional[str] = None


class ChatTranscriptReporter:
    """Appends chat messages for proposals, replies, results and failures."""

    def __init__(self, greeting: str | None = GREETING) -> None:
        self._ids = itertools.count(1)
        self.messages: list[ChatMessage] = []
        if greeting:
            self._append("assistant", greeting)

    def _append(self, kind: str, content: str, **extra: Any) -> ChatMessage:
        message = ChatMessage(id=str(next(self._ids)), type=kind, content=content, **extra)
        self.messages.append(message)
        return message

    def user(self, text: str, images: list[str] | None = None) -> ChatMessage:
        return self._append("user", text, images=list(images or []))

    def proposal(self, action: ProposedAction, preview: str) -> ChatMessage:
        return self._append("assistant", preview, function_call=action.wire())

    def text(self, message: str) -> ChatMessage:
        return self._append("assistant", message)

    def success(self, result: ActionResult) -> ChatMessage:
        return self._append("assistant", result.message, link=result.link)

    def execution_failed(self, error: Exception) -> ChatMessage:
        return self._append("assistant", f"Failed to execute action: {error}")

    def request_failed(self, error: Exception) -> ChatMessage:
        return self._append("assistant", f"Sorry, I encountered an error: {error}")

    def cancelled(self) -> ChatMessage:
        return self._append("assistant", CANCELLED_MESSAGE)
