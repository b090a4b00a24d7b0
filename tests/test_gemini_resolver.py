"""Tests for the Gemini intent resolver against a fake SDK client."""

import base64
from types import SimpleNamespace

import pytest
from google.genai import types

from rtp_core.brain.gemini import GeminiIntentResolver, to_function_declarations, to_genai_schema
from rtp_core.errors import ResolverError
from rtp_core.schema.actor import Actor
from rtp_core.schema.request import ImageBlob
from rtp_engines.assistant.catalog import get_schema, list_schemas

from conftest import SHOYU_BLAST_ARGS

ACTOR = Actor(id="e1", email="line.cook@rtp.example", name="Line Cook", role="employee")


class FakeModels:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    async def generate_content(self, *, model, contents, config):
        self.requests.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


def _resolver(models: FakeModels) -> GeminiIntentResolver:
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiIntentResolver(model_name="gemini-test", client=client)


def _call(name: str, args: dict) -> SimpleNamespace:
    return SimpleNamespace(name=name, args=args)


@pytest.mark.anyio
async def test_function_call_becomes_proposal() -> None:
    models = FakeModels(SimpleNamespace(function_calls=[_call("create_recipe", SHOYU_BLAST_ARGS)], text=None))

    resolution = await _resolver(models).resolve("create a recipe called Shoyu Blast", [], list_schemas(), ACTOR)

    assert resolution.text is None
    assert resolution.proposed_action.name == "create_recipe"
    assert resolution.proposed_action.arguments == SHOYU_BLAST_ARGS
    request = models.requests[0]
    assert request["model"] == "gemini-test"
    assert "Current user: Line Cook" in request["config"].system_instruction
    assert "User role: employee" in request["config"].system_instruction
    declared = [fn.name for fn in request["config"].tools[0].function_declarations]
    assert declared == [schema.name for schema in list_schemas()]


@pytest.mark.anyio
async def test_only_the_first_call_is_used() -> None:
    calls = [
        _call("delete_recipe", {"slug": "tonkotsu-classic"}),
        _call("delete_product", {"slug": "chili-oil"}),
    ]
    models = FakeModels(SimpleNamespace(function_calls=calls, text=None))

    resolution = await _resolver(models).resolve("clean up", [], list_schemas(), ACTOR)

    assert resolution.proposed_action.name == "delete_recipe"


@pytest.mark.anyio
async def test_plain_text_reply() -> None:
    models = FakeModels(SimpleNamespace(function_calls=None, text="  Which recipe do you mean?  "))

    resolution = await _resolver(models).resolve("update the recipe", [], list_schemas(), ACTOR)

    assert resolution.text == "Which recipe do you mean?"
    assert resolution.proposed_action is None


@pytest.mark.anyio
async def test_empty_response_is_a_failure_not_a_reply() -> None:
    models = FakeModels(SimpleNamespace(function_calls=[], text=None))

    with pytest.raises(ResolverError):
        await _resolver(models).resolve("hello?", [], list_schemas(), ACTOR)


@pytest.mark.anyio
async def test_provider_errors_are_wrapped() -> None:
    models = FakeModels(error=TimeoutError("deadline exceeded"))

    with pytest.raises(ResolverError, match="deadline exceeded"):
        await _resolver(models).resolve("add a product", [], list_schemas(), ACTOR)


@pytest.mark.anyio
async def test_calls_outside_the_catalog_are_rejected() -> None:
    models = FakeModels(SimpleNamespace(function_calls=[_call("drop_tables", {})], text=None))

    with pytest.raises(ResolverError, match="unknown action"):
        await _resolver(models).resolve("drop everything", [], list_schemas(), ACTOR)


@pytest.mark.anyio
async def test_calls_with_missing_required_fields_are_rejected() -> None:
    models = FakeModels(SimpleNamespace(function_calls=[_call("update_inventory", {"quantity": 3})], text=None))

    with pytest.raises(ResolverError, match="product_slug"):
        await _resolver(models).resolve("set stock to 3", [], list_schemas(), ACTOR)


@pytest.mark.anyio
async def test_images_are_sent_as_inline_bytes() -> None:
    models = FakeModels(SimpleNamespace(function_calls=None, text="Nice bowl!"))
    raw = b"jpeg-bytes"
    image = ImageBlob(mime_type="image/jpeg", data="data:image/jpeg;base64," + base64.b64encode(raw).decode())

    await _resolver(models).resolve("what is this?", [image], list_schemas(), ACTOR)

    parts = models.requests[0]["contents"][0].parts
    assert parts[0].text == "what is this?"
    assert parts[1].inline_data.data == raw
    assert parts[1].inline_data.mime_type == "image/jpeg"


def test_schema_translation_keeps_structure() -> None:
    schema = to_genai_schema(get_schema("create_recipe").parameters)

    assert schema.type == types.Type.OBJECT
    assert schema.properties["difficulty"].enum == ["Easy", "Medium", "Hard"]
    assert schema.properties["ingredients"].type == types.Type.ARRAY
    assert schema.properties["ingredients"].items.required == ["name", "amount"]
    assert "slug" in schema.required


def test_declarations_cover_catalog() -> None:
    declarations = to_function_declarations(list_schemas())

    assert {declaration.name for declaration in declarations} == {schema.name for schema in list_schemas()}
