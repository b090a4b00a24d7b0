"""Tests for the hosted store client's request shapes and error mapping."""

import asyncio
import json

import httpx
import pytest

from rtp_core.errors import StoreError
from rtp_engines.assistant.store import SupabaseStore

BASE_URL = "https://rtp.supabase.example"


def _store(handler) -> SupabaseStore:
    return SupabaseStore(BASE_URL, "service-key", transport=httpx.MockTransport(handler))


def test_single_insert_asks_for_an_object() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["accept"] = request.headers.get("accept")
        seen["prefer"] = request.headers.get("prefer")
        seen["apikey"] = request.headers.get("apikey")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "r1", **seen["body"]})

    rows = asyncio.run(_store(handler).insert("recipes", {"slug": "shoyu-blast"}))

    assert rows == [{"id": "r1", "slug": "shoyu-blast"}]
    assert seen["method"] == "POST"
    assert seen["path"] == "/rest/v1/recipes"
    assert seen["accept"] == "application/vnd.pgrst.object+json"
    assert seen["prefer"] == "return=representation"
    assert seen["apikey"] == "service-key"


def test_update_filters_by_equality() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["method"] = request.method
        return httpx.Response(200, json={"id": "p1", "slug": "chili-oil", "stock_quantity": 3})

    asyncio.run(_store(handler).update("products", {"stock_quantity": 3}, {"slug": "chili-oil", "active": True}))

    assert seen["method"] == "PATCH"
    assert seen["params"] == {"slug": "eq.chili-oil", "active": "eq.true"}


def test_postgrest_error_becomes_store_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            406,
            json={
                "code": "PGRST116",
                "details": "The result contains 0 rows",
                "hint": None,
                "message": "JSON object requested, multiple (or no) rows returned",
            },
        )

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(_store(handler).delete("products", {"slug": "nonexistent-slug"}))

    assert excinfo.value.message == "JSON object requested, multiple (or no) rows returned"
    assert excinfo.value.code == "PGRST116"


def test_network_failure_becomes_store_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(_store(handler).select("recipes"))

    assert excinfo.value.code == "network"


def test_get_user_reads_role_from_metadata_and_rejects_bad_tokens() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["authorization"] == "Bearer good":
            return httpx.Response(200, json={"id": "u1", "email": "a@b", "user_metadata": {"role": "admin"}})
        return httpx.Response(401, json={"msg": "invalid JWT"})

    store = _store(handler)

    assert asyncio.run(store.get_user("good")).role == "admin"
    assert asyncio.run(store.get_user("bad")) is None


def test_update_user_metadata_merges_existing_metadata() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(
                200,
                json={"users": [{"id": "u9", "email": "New.Hire@rtp.example", "user_metadata": {"name": "Kai"}}]},
            )
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "u9", **seen["body"]})

    asyncio.run(_store(handler).update_user_metadata("new.hire@rtp.example", {"role": "employee", "approved": True}))

    assert seen["path"] == "/auth/v1/admin/users/u9"
    assert seen["body"] == {"user_metadata": {"name": "Kai", "role": "employee", "approved": True}}


def test_update_user_metadata_unknown_email() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"users": []})

    with pytest.raises(StoreError, match="User not found"):
        asyncio.run(_store(handler).update_user_metadata("ghost@rtp.example", {"role": "admin"}))


def test_requires_url_and_key() -> None:
    with pytest.raises(ValueError):
        SupabaseStore("", "key")
