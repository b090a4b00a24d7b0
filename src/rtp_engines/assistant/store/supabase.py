"""Hosted store client: PostgREST for tables, GoTrue for sessions and accounts."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx
from loguru import logger

from rtp_core.errors import StoreError
from rtp_core.logging_utils import log_event
from rtp_core.schema.actor import Actor

Row = dict[str, Any]

SINGLE_OBJECT_ACCEPT = "application/vnd.pgrst.object+json"
ADMIN_USERS_PAGE_SIZE = 1000


def _filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "eq.true" if value else "eq.false"
    if value is None:
        return "is.null"
    return f"eq.{value}"


def _match_params(match: Optional[Mapping[str, Any]]) -> dict[str, str]:
    return {column: _filter_value(value) for column, value in (match or {}).items()}


def _extract_error(response: httpx.Response) -> StoreError:
    try:
        payload = response.json()
    except ValueError:
        payload = response.text

    if isinstance(payload, dict):
        message = str(
            payload.get("message")
            or payload.get("msg")
            or payload.get("error_description")
            or payload.get("error")
            or response.reason_phrase
        )
        code = payload.get("code") or payload.get("error_code")
        details = payload.get("details")
    else:
        message = str(payload or response.reason_phrase)
        code = None
        details = None

    return StoreError(message=message, code=str(code) if code is not None else str(response.status_code), details=details)


class SupabaseStore:
    """
    Store backed by a hosted Supabase project.

    Table calls go through PostgREST. Single-row calls ask for a JSON object,
    so PostgREST itself rejects (and rolls back) a mutation touching zero or
    several rows.
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url or not service_key:
            raise ValueError("SupabaseStore needs both SUPABASE_URL and SUPABASE_SERVICE_KEY.")
        self._url = url.rstrip("/")
        self._service_key = service_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self, bearer: str | None = None, **extra: str) -> dict[str, str]:
        headers = {
            "apikey": self._service_key,
            "Authorization": f"Bearer {bearer or self._service_key}",
        }
        headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        endpoint = f"{self._url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                return await client.request(method, endpoint, params=params, json=json, headers=headers)
        except httpx.RequestError as exc:
            logger.warning(log_event("store.request.failed", method=method, path=path, error=str(exc)))
            raise StoreError(message=f"Store unreachable: {exc}", code="network") from exc

    async def _table_call(
        self,
        method: str,
        table: str,
        *,
        single: bool,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> list[Row]:
        extra = {"Prefer": "return=representation"}
        if single:
            extra["Accept"] = SINGLE_OBJECT_ACCEPT
        response = await self._send(method, f"/rest/v1/{table}", params=params, json=json, headers=self._headers(**extra))
        if response.status_code >= 400:
            error = _extract_error(response)
            logger.warning(
                log_event("store.table.error", method=method, table=table, status=response.status_code, code=error.code)
            )
            raise error

        if not response.content:
            return []
        payload = response.json()
        if isinstance(payload, dict):
            return [payload]
        return list(payload)

    async def insert(self, table: str, values: Mapping[str, Any], *, single: bool = True) -> list[Row]:
        return await self._table_call("POST", table, single=single, json=dict(values))

    async def update(
        self, table: str, values: Mapping[str, Any], match: Mapping[str, Any], *, single: bool = True
    ) -> list[Row]:
        return await self._table_call("PATCH", table, single=single, params=_match_params(match), json=dict(values))

    async def delete(self, table: str, match: Mapping[str, Any], *, single: bool = True) -> list[Row]:
        return await self._table_call("DELETE", table, single=single, params=_match_params(match))

    async def select(self, table: str, match: Optional[Mapping[str, Any]] = None) -> list[Row]:
        params = {"select": "*", **_match_params(match)}
        return await self._table_call("GET", table, single=False, params=params)

    async def get_user(self, access_token: str) -> Optional[Actor]:
        response = await self._send("GET", "/auth/v1/user", headers=self._headers(bearer=access_token))
        if response.status_code in (401, 403):
            return None
        if response.status_code >= 400:
            raise _extract_error(response)
        return Actor.from_session_user(response.json())

    async def _find_account(self, email: str) -> Row | None:
        target = email.strip().lower()
        page = 1
        while True:
            response = await self._send(
                "GET",
                "/auth/v1/admin/users",
                params={"page": page, "per_page": ADMIN_USERS_PAGE_SIZE},
                headers=self._headers(),
            )
            if response.status_code >= 400:
                raise _extract_error(response)
            users = response.json().get("users") or []
            for user in users:
                if str(user.get("email") or "").lower() == target:
                    return user
            if len(users) < ADMIN_USERS_PAGE_SIZE:
                return None
            page += 1

    async def update_user_metadata(self, email: str, metadata: Mapping[str, Any]) -> Row:
        account = await self._find_account(email)
        if account is None:
            raise StoreError(message="User not found", code="user_not_found")

        merged = {**(account.get("user_metadata") or {}), **metadata}
        response = await self._send(
            "PUT",
            f"/auth/v1/admin/users/{account['id']}",
            json={"user_metadata": merged},
            headers=self._headers(),
        )
        if response.status_code >= 400:
            raise _extract_error(response)
        return response.json()
