"""Shared fixtures: a seeded in-memory store, a scripted resolver and the API app."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from app_api import create_app
from rtp_core.schema.action import ProposedAction, Resolution
from rtp_engines.assistant.store import InMemoryStore

EMPLOYEE_TOKEN = "employee-token"
ADMIN_TOKEN = "admin-token"
CUSTOMER_TOKEN = "customer-token"

SHOYU_BLAST_ARGS: dict[str, Any] = {
    "title": "Shoyu Blast",
    "slug": "shoyu-blast",
    "difficulty": "Easy",
    "servings": 2,
    "ingredients": [{"name": "soy sauce", "amount": "2", "unit": "tbsp"}],
    "instructions": [{"step": 1, "instruction": "mix"}],
}


class ScriptedResolver:
    """Deterministic stand-in for the model oracle: replays queued resolutions."""

    def __init__(self, *script: Resolution | Exception) -> None:
        self.script = list(script)
        self.calls: list[dict[str, Any]] = []

    def queue(self, *script: Resolution | Exception) -> None:
        self.script.extend(script)

    def propose(self, name: str, **arguments: Any) -> None:
        self.queue(Resolution(proposed_action=ProposedAction(name=name, arguments=arguments)))

    async def resolve(self, prompt_text, images, catalog, actor) -> Resolution:
        self.calls.append({"prompt": prompt_text, "images": list(images), "catalog": list(catalog), "actor": actor})
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> InMemoryStore:
    memory = InMemoryStore()
    memory.add_account("line.cook@rtp.example", role="employee", name="Line Cook", token=EMPLOYEE_TOKEN)
    memory.add_account("owner@rtp.example", role="admin", name="Owner", token=ADMIN_TOKEN)
    memory.add_account("guest@rtp.example", role="customer", token=CUSTOMER_TOKEN)
    memory.add_account("new.hire@rtp.example")
    memory.seed(
        "recipes",
        {
            "title": "Tonkotsu Classic",
            "slug": "tonkotsu-classic",
            "description": "Rich pork bone broth",
            "difficulty": "Hard",
            "servings": 4,
            "ingredients": [{"name": "pork bones", "amount": "2", "unit": "kg"}],
            "instructions": [{"step": 1, "instruction": "boil for 12 hours"}],
            "images": [],
            "tips": "Skim often",
            "active": True,
            "featured": True,
        },
    )
    memory.seed(
        "products",
        {
            "name": "Chili Oil",
            "slug": "chili-oil",
            "description": "House chili crisp",
            "price_regular": 12.5,
            "category": "retail-product",
            "stock_quantity": 30,
            "images": [],
            "active": True,
            "is_featured": False,
        },
    )
    return memory


@pytest.fixture
def resolver() -> ScriptedResolver:
    return ScriptedResolver()


@pytest.fixture
def app(store: InMemoryStore, resolver: ScriptedResolver):
    return create_app(store=store, resolver=resolver, signing_key="", reporters=[])


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
