# src/rtp_core/brain/gemini.py
from __future__ import annotations

from typing import Any, Sequence

from google import genai
from google.genai import types
from loguru import logger

from rtp_core.errors import ResolverError
from rtp_core.logging_utils import log_event
from rtp_core.schema.action import ProposedAction, Resolution
from rtp_core.schema.actor import Actor
from rtp_core.schema.catalog import FunctionSchema, ParameterSchema
from rtp_core.schema.request import ImageBlob
from rtp_core.validation import validate_arguments

SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant helping employees at {restaurant} restaurant.
You can help with:
- Creating, updating and deleting recipes (with ingredients, instructions, images)
- Creating, updating and deleting products for the shop
- Approving users and setting their roles
- Updating inventory quantities

When a user asks you to perform an action, use the appropriate function call.
Be conversational and helpful. Ask for clarification if needed.
When creating recipes or products, extract all relevant information from the user's message and images.
Slugs are lowercase words joined by hyphens, e.g. "Shoyu Blast" becomes "shoyu-blast".
For updates, only pass the fields the user wants to change.

Current user: {user}
User role: {role}"""


def to_genai_schema(parameter: ParameterSchema) -> types.Schema:
    """Translate our parameter descriptor into the SDK's Schema type."""
    return types.Schema(
        type=types.Type(parameter.type.upper()),
        description=parameter.description,
        enum=list(parameter.enum) if parameter.enum else None,
        required=list(parameter.required) if parameter.required else None,
        properties={key: to_genai_schema(child) for key, child in parameter.properties.items()}
        if parameter.properties
        else None,
        items=to_genai_schema(parameter.items) if parameter.items else None,
    )


def to_function_declarations(catalog: Sequence[FunctionSchema]) -> list[types.FunctionDeclaration]:
    return [
        types.FunctionDeclaration(
            name=schema.name,
            description=schema.description,
            parameters=to_genai_schema(schema.parameters),
        )
        for schema in catalog
    ]


class GeminiIntentResolver:
    """
    Turns an operator message (plus optional images) into either a plain
    reply or a single proposed catalog action. Read-only: it never executes
    what the model asks for.
    """

    def __init__(
        self,
        *,
        model_name: str = "gemini-2.5-flash",
        api_key: str | None = None,
        timeout_ms: int | None = None,
        restaurant_name: str = "Ramen To The People",
        client: Any = None,
    ) -> None:
        if client is None:
            http_options = types.HttpOptions(timeout=timeout_ms) if timeout_ms else None
            client = genai.Client(api_key=api_key or None, http_options=http_options)
        self._client = client
        self._model_name = model_name
        self._restaurant_name = restaurant_name

    def system_prompt(self, actor: Actor) -> str:
        return SYSTEM_PROMPT_TEMPLATE.format(
            restaurant=self._restaurant_name,
            user=actor.display_name,
            role=actor.role,
        )

    @staticmethod
    def _contents(prompt_text: str, images: Sequence[ImageBlob]) -> list[types.Content]:
        parts = [types.Part.from_text(text=prompt_text)]
        for image in images:
            try:
                payload = image.raw_bytes()
            except ValueError as exc:
                raise ResolverError(f"Attached image could not be decoded: {exc}") from exc
            parts.append(types.Part.from_bytes(data=payload, mime_type=image.mime_type))
        return [types.Content(role="user", parts=parts)]

    async def resolve(
        self,
        prompt_text: str,
        images: Sequence[ImageBlob],
        catalog: Sequence[FunctionSchema],
        actor: Actor,
    ) -> Resolution:
        contents = self._contents(prompt_text, images)
        config = types.GenerateContentConfig(
            system_instruction=self.system_prompt(actor),
            tools=[types.Tool(function_declarations=to_function_declarations(catalog))],
        )

        logger.info(
            log_event(
                "assistant.resolver.request",
                model=self._model_name,
                actor=actor.email,
                images=len(images),
                chars=len(prompt_text),
            )
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=contents,
                config=config,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(log_event("assistant.resolver.failed", model=self._model_name, error=str(exc)))
            raise ResolverError(str(exc) or exc.__class__.__name__) from exc

        function_calls = list(getattr(response, "function_calls", None) or [])
        if function_calls:
            if len(function_calls) > 1:
                # Only the first proposal is ever surfaced.
                logger.info(
                    log_event("assistant.resolver.extra_calls_dropped", kept=function_calls[0].name, dropped=len(function_calls) - 1)
                )
            return Resolution(proposed_action=self._to_proposal(function_calls[0], catalog))

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            logger.warning(log_event("assistant.resolver.empty", model=self._model_name))
            raise ResolverError("The assistant returned an empty response. This might be due to safety filters.")
        return Resolution(text=text)

    @staticmethod
    def _to_proposal(function_call: Any, catalog: Sequence[FunctionSchema]) -> ProposedAction:
        name = str(getattr(function_call, "name", "") or "")
        schema = next((entry for entry in catalog if entry.name == name), None)
        if schema is None:
            logger.warning(log_event("assistant.resolver.unknown_function", function=name))
            raise ResolverError(f"The assistant proposed an unknown action: {name or '<unnamed>'}")

        arguments = dict(getattr(function_call, "args", None) or {})
        problems = validate_arguments(schema, arguments)
        if problems:
            logger.warning(log_event("assistant.resolver.invalid_arguments", function=name, problems=len(problems)))
            raise ResolverError(f"The assistant proposed {name} with invalid arguments: " + "; ".join(problems))

        logger.info(log_event("assistant.resolver.proposal", function=name))
        return ProposedAction(name=name, arguments=arguments)
