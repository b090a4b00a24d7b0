from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from rtp_core.config import settings
from rtp_core.schema.action import ActionResult, ProposedAction
from rtp_core.schema.request import ImageBlob

ASSISTANT_PATH = "/api/ai/assistant"


@dataclass
class AssistantAPIError(Exception):
    status_code: int
    message: str
    details: Any = None

    def __str__(self) -> str:
        if self.details and isinstance(self.details, str):
            return f"{self.message} ({self.details})"
        return self.message


def _extract_error_payload(response: httpx.Response) -> tuple[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        payload = response.text

    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail, None
        return str(payload.get("error") or payload.get("message") or response.reason_phrase), payload.get("details")
    return str(payload or response.reason_phrase), None


class AssistantAPIClient:
    """Talks to `POST /api/ai/assistant` on behalf of one signed-in operator."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = (base_url or settings.ASSISTANT_API_URL).rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    ASSISTANT_PATH,
                    json=body,
                    headers={"Authorization": f"Bearer {self._access_token}"},
                )
        except httpx.RequestError as exc:
            raise AssistantAPIError(status_code=0, message=str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 400:
            message, details = _extract_error_payload(response)
            raise AssistantAPIError(status_code=response.status_code, message=message, details=details)

        try:
            payload = response.json()
        except ValueError as exc:
            raise AssistantAPIError(status_code=response.status_code, message="Invalid JSON response") from exc
        if not isinstance(payload, dict):
            raise AssistantAPIError(status_code=response.status_code, message="Invalid JSON response")
        if payload.get("error"):
            raise AssistantAPIError(
                status_code=response.status_code, message=str(payload["error"]), details=payload.get("details")
            )
        return payload

    async def propose(self, message: str, images: Sequence[ImageBlob] = ()) -> dict[str, Any]:
        return await self._post(
            {
                "message": message,
                "images": [image.model_dump(by_alias=True) for image in images],
            }
        )

    async def execute(self, action: ProposedAction, signature: str | None = None) -> ActionResult:
        body: dict[str, Any] = {"action": action.wire()}
        if signature:
            body["signature"] = signature
        payload = await self._post(body)
        try:
            return ActionResult.model_validate(payload)
        except ValidationError as exc:
            raise AssistantAPIError(status_code=200, message="Invalid action result", details=payload) from exc
