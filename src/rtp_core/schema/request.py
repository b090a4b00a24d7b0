from __future__ import annotations

import base64
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageBlob(BaseModel):
    """An attached image: base64 data-URL (`data:image/png;base64,...`) or bare base64."""

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(..., alias="mimeType")
    data: str

    def raw_bytes(self) -> bytes:
        payload = self.data
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        return base64.b64decode(payload)


class ActionEnvelope(BaseModel):
    function: str = Field(..., min_length=1)
    arguments: dict[str, Any] = Field(default_factory=dict)


class AssistantRequest(BaseModel):
    """
    Body of `POST /api/ai/assistant`. A body with `action` executes a
    confirmed action; otherwise `message`/`images` ask for a proposal.
    """

    message: Optional[str] = Field(default=None, max_length=12000)
    images: list[ImageBlob] = Field(default_factory=list)
    action: Optional[ActionEnvelope] = None
    signature: Optional[str] = None

    @property
    def is_execute(self) -> bool:
        return self.action is not None

    @property
    def is_propose(self) -> bool:
        return self.action is None and (bool((self.message or "").strip()) or bool(self.images))
