"""Action dispatcher: the only path from a confirmed action to a store mutation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from loguru import logger

from rtp_core.errors import ActionArgumentError, StoreError
from rtp_core.logging_utils import log_event
from rtp_core.protocols.reporter import Reporter
from rtp_core.protocols.store import Store
from rtp_core.schema.action import ActionResult, ConfirmedAction
from rtp_core.schema.actor import Actor, role_at_least
from rtp_core.validation import validate_arguments

from .catalog import catalog_names, get_schema
from .handlers import HANDLERS
from .preview import rendered_names

# Catalog, handlers and previews must cover exactly the same actions.
if set(HANDLERS) != catalog_names() or rendered_names() != catalog_names():
    raise RuntimeError(
        "Assistant catalog, handlers and previews are out of sync: "
        f"catalog={sorted(catalog_names())} handlers={sorted(HANDLERS)} previews={sorted(rendered_names())}"
    )


@dataclass(frozen=True)
class DispatchOutcome:
    result: ActionResult
    status_code: int = 200


class ActionDispatcher:
    """
    Runs one confirmed action for one actor:
    catalog lookup, role check, argument check, handler, result envelope.
    Nothing touches the store before all three checks pass.
    """

    def __init__(self, store: Store, reporters: Sequence[Reporter] = ()) -> None:
        self._store = store
        self._reporters = list(reporters)

    def _finish(self, action: ConfirmedAction, actor: Actor, result: ActionResult, status_code: int) -> DispatchOutcome:
        for reporter in self._reporters:
            reporter.emit(action, actor, result)
        return DispatchOutcome(result=result, status_code=status_code)

    async def dispatch(self, action: ConfirmedAction, actor: Actor) -> DispatchOutcome:
        schema = get_schema(action.name)
        if schema is None:
            logger.warning(log_event("assistant.dispatch.unknown_action", action=action.name, actor=actor.email))
            return self._finish(action, actor, ActionResult.error("Unknown function"), 400)

        if not role_at_least(actor.role, schema.min_role):
            logger.warning(
                log_event(
                    "assistant.dispatch.forbidden",
                    action=action.name,
                    actor=actor.email,
                    role=actor.role,
                    required=schema.min_role,
                )
            )
            message = "Only admins can approve users" if action.name == "approve_user" else (
                f"The {schema.min_role} role is required for {action.name}"
            )
            return self._finish(action, actor, ActionResult.error(message), 403)

        problems = validate_arguments(schema, action.arguments)
        if problems:
            logger.info(log_event("assistant.dispatch.invalid_arguments", action=action.name, problems=len(problems)))
            return self._finish(action, actor, ActionResult.error("Invalid arguments: " + "; ".join(problems)), 400)

        logger.info(log_event("assistant.dispatch.begin", action=action.name, actor=actor.email, role=actor.role))
        try:
            result = await HANDLERS[action.name](action.arguments, self._store)
        except ActionArgumentError as exc:
            return self._finish(action, actor, ActionResult.error(str(exc)), 400)
        except StoreError as exc:
            logger.warning(
                log_event("assistant.dispatch.store_error", action=action.name, code=exc.code, message=exc.message)
            )
            return self._finish(action, actor, ActionResult.error(exc.message), 500)

        logger.info(log_event("assistant.dispatch.done", action=action.name, link=result.link))
        return self._finish(action, actor, result, 200)
