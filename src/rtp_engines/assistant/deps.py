"""FastAPI dependency providers for the assistant routes."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from loguru import logger

from rtp_core.errors import StoreError
from rtp_core.logging_utils import log_event
from rtp_core.protocols.resolver import IntentResolver
from rtp_core.protocols.store import Store
from rtp_core.schema.actor import Actor

from .dispatcher import ActionDispatcher
from .signing import ActionSigner


def _app_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        logger.error(log_event("assistant.deps.missing", component=name))
        raise HTTPException(status_code=503, detail=f"Assistant {name} is not configured")
    return value


def get_store(request: Request) -> Store:
    return _app_state(request, "store")


def get_resolver(request: Request) -> IntentResolver:
    return _app_state(request, "resolver")


def get_dispatcher(request: Request) -> ActionDispatcher:
    return _app_state(request, "dispatcher")


def get_signer(request: Request) -> ActionSigner:
    return _app_state(request, "signer")


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_actor(request: Request, store: Store = Depends(get_store)) -> Actor:
    """Resolve the session behind the request. Fails closed with 401."""
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        actor = await store.get_user(token)
    except StoreError as exc:
        logger.warning(log_event("assistant.auth.lookup_failed", code=exc.code, error=exc.message))
        actor = None
    if actor is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return actor
