from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from rtp_core.errors import ResolverError, SignatureError
from rtp_core.logging_utils import log_event
from rtp_core.protocols.resolver import IntentResolver
from rtp_core.schema.action import ConfirmedAction, ProposedAction
from rtp_core.schema.actor import Actor
from rtp_core.schema.request import AssistantRequest

from .catalog import CATALOG_VERSION, list_schemas
from .deps import get_dispatcher, get_resolver, get_signer, require_actor
from .dispatcher import ActionDispatcher
from .preview import proposal_message
from .signing import ActionSigner

ASSISTANT_TAG = "AI-Assistant"

router = APIRouter(prefix="/api/ai/assistant", tags=[ASSISTANT_TAG])


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


def _proposal_payload(action: ProposedAction, signer: ActionSigner) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": "function_call",
        "function": action.name,
        "arguments": action.arguments,
        "message": proposal_message(action),
    }
    signature = signer.sign(action)
    if signature:
        payload["signature"] = signature
    return payload


async def _propose(
    body: AssistantRequest,
    actor: Actor,
    resolver: IntentResolver,
    signer: ActionSigner,
) -> JSONResponse:
    try:
        resolution = await resolver.resolve(body.message or "", body.images, list_schemas(), actor)
    except ResolverError as exc:
        logger.warning(log_event("assistant.propose.failed", actor=actor.email, error=str(exc)))
        return _error(500, "Failed to process request", str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception(log_event("assistant.propose.crashed", actor=actor.email))
        return _error(500, "Failed to process request", str(exc) or exc.__class__.__name__)

    if resolution.proposed_action is not None:
        logger.info(
            log_event("assistant.propose.action", actor=actor.email, function=resolution.proposed_action.name)
        )
        return JSONResponse(_proposal_payload(resolution.proposed_action, signer))

    logger.info(log_event("assistant.propose.text", actor=actor.email))
    return JSONResponse({"type": "text", "message": resolution.text})


async def _execute(
    body: AssistantRequest,
    actor: Actor,
    dispatcher: ActionDispatcher,
    signer: ActionSigner,
) -> JSONResponse:
    action = ConfirmedAction(name=body.action.function, arguments=body.action.arguments)
    try:
        signer.verify(action, body.signature)
    except SignatureError as exc:
        logger.warning(log_event("assistant.execute.bad_signature", actor=actor.email, function=action.name))
        return _error(400, str(exc))

    try:
        outcome = await dispatcher.dispatch(action, actor)
    except Exception as exc:  # noqa: BLE001
        logger.exception(log_event("assistant.execute.crashed", actor=actor.email, function=action.name))
        return _error(500, "Failed to execute action", str(exc))

    if outcome.result.ok:
        return JSONResponse(outcome.result.model_dump(exclude_none=True), status_code=outcome.status_code)
    return _error(outcome.status_code, outcome.result.message)


@router.post("")
async def assistant(
    body: AssistantRequest,
    actor: Actor = Depends(require_actor),
    resolver: IntentResolver = Depends(get_resolver),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
    signer: ActionSigner = Depends(get_signer),
) -> JSONResponse:
    """Propose an action from a message, or execute a confirmed one. The body shape decides."""
    if body.is_execute:
        return await _execute(body, actor, dispatcher, signer)
    if not body.is_propose:
        return _error(400, "Send a message, images, or a confirmed action")
    return await _propose(body, actor, resolver, signer)


@router.get("/catalog")
async def catalog(actor: Actor = Depends(require_actor)) -> dict[str, Any]:
    return {
        "version": CATALOG_VERSION,
        "functions": [{**schema.declaration(), "min_role": schema.min_role} for schema in list_schemas()],
    }
