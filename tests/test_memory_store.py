"""Tests for the in-memory store's single-row and uniqueness semantics."""

import asyncio

import pytest

from rtp_core.errors import StoreError
from rtp_engines.assistant.store import InMemoryStore


def test_insert_assigns_id_and_enforces_unique_slug() -> None:
    store = InMemoryStore()

    first = asyncio.run(store.insert("products", {"slug": "menma", "name": "Menma"}))
    assert first[0]["id"]

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(store.insert("products", {"slug": "menma", "name": "Menma again"}))
    assert excinfo.value.code == "23505"
    assert len(store.rows("products")) == 1


def test_single_update_requires_exactly_one_row() -> None:
    store = InMemoryStore()
    store.seed("recipes", {"slug": "a", "servings": 1})

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(store.update("recipes", {"servings": 3}, {"slug": "b"}))

    assert excinfo.value.code == "PGRST116"
    assert excinfo.value.details == "The result contains 0 rows"
    assert store.rows("recipes")[0]["servings"] == 1


def test_multi_row_delete_without_single() -> None:
    store = InMemoryStore()
    store.seed("products", {"slug": "a", "category": "merchandise"}, {"slug": "b", "category": "merchandise"})

    with pytest.raises(StoreError):
        asyncio.run(store.delete("products", {"category": "merchandise"}))
    removed = asyncio.run(store.delete("products", {"category": "merchandise"}, single=False))

    assert {row["slug"] for row in removed} == {"a", "b"}
    assert store.rows("products") == []


def test_returned_rows_are_copies() -> None:
    store = InMemoryStore()
    store.seed("recipes", {"slug": "a", "ingredients": [{"name": "salt", "amount": "1"}]})

    rows = asyncio.run(store.select("recipes"))
    rows[0]["ingredients"].append({"name": "sugar", "amount": "1"})

    assert len(store.rows("recipes")[0]["ingredients"]) == 1


def test_sessions_follow_account_metadata() -> None:
    store = InMemoryStore()
    store.add_account("cook@rtp.example", role="employee", token="t1")

    assert asyncio.run(store.get_user("t1")).role == "employee"
    assert asyncio.run(store.get_user("bogus")) is None

    asyncio.run(store.update_user_metadata("Cook@rtp.example", {"role": "admin", "approved": True}))

    assert asyncio.run(store.get_user("t1")).role == "admin"
