"""In-process store for local development and tests."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from rtp_core.errors import StoreError
from rtp_core.schema.actor import Actor

Row = dict[str, Any]

UNIQUE_COLUMNS: dict[str, str] = {
    "recipes": "slug",
    "products": "slug",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _single_row_error(count: int) -> StoreError:
    # Same wording PostgREST uses when a single object is requested.
    return StoreError(
        message="JSON object requested, multiple (or no) rows returned",
        code="PGRST116",
        details=f"The result contains {count} rows",
    )


def _matches(row: Row, match: Optional[Mapping[str, Any]]) -> bool:
    return all(row.get(column) == value for column, value in (match or {}).items())


class InMemoryStore:
    """
    Dict-backed tables with the unique keys the hosted schema enforces
    (recipes.slug, products.slug), plus accounts and sessions.
    Rows handed out are copies; callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._tables: dict[str, list[Row]] = {}
        self._accounts: dict[str, Row] = {}
        self._sessions: dict[str, str] = {}

    # ------------------------------------------------------------------
    # seeding helpers
    # ------------------------------------------------------------------
    def seed(self, table: str, *rows: Mapping[str, Any]) -> list[Row]:
        seeded = []
        for values in rows:
            row = {"id": str(uuid.uuid4()), "created_at": _now(), "updated_at": _now(), **values}
            self._tables.setdefault(table, []).append(row)
            seeded.append(copy.deepcopy(row))
        return seeded

    def add_account(
        self,
        email: str,
        *,
        role: str | None = None,
        name: str | None = None,
        token: str | None = None,
        **metadata: Any,
    ) -> Row:
        user_metadata = dict(metadata)
        if role is not None:
            user_metadata["role"] = role
        if name is not None:
            user_metadata["name"] = name
        account = {"id": str(uuid.uuid4()), "email": email, "user_metadata": user_metadata}
        self._accounts[email.lower()] = account
        if token:
            self._sessions[token] = email.lower()
        return copy.deepcopy(account)

    def rows(self, table: str) -> list[Row]:
        return copy.deepcopy(self._tables.get(table, []))

    def account(self, email: str) -> Row | None:
        account = self._accounts.get(email.lower())
        return copy.deepcopy(account) if account else None

    # ------------------------------------------------------------------
    # Store protocol
    # ------------------------------------------------------------------
    def _check_unique(self, table: str, candidate: Row, ignore: Row | None = None) -> None:
        column = UNIQUE_COLUMNS.get(table)
        if column is None or candidate.get(column) is None:
            return
        for row in self._tables.get(table, []):
            if row is ignore:
                continue
            if row.get(column) == candidate[column]:
                raise StoreError(
                    message=f'duplicate key value violates unique constraint "{table}_{column}_key"',
                    code="23505",
                    details=f"Key ({column})=({candidate[column]}) already exists.",
                )

    async def insert(self, table: str, values: Mapping[str, Any], *, single: bool = True) -> list[Row]:
        row = {"id": str(uuid.uuid4()), "created_at": _now(), "updated_at": _now(), **copy.deepcopy(dict(values))}
        self._check_unique(table, row)
        self._tables.setdefault(table, []).append(row)
        return [copy.deepcopy(row)]

    async def update(
        self, table: str, values: Mapping[str, Any], match: Mapping[str, Any], *, single: bool = True
    ) -> list[Row]:
        targets = [row for row in self._tables.get(table, []) if _matches(row, match)]
        if single and len(targets) != 1:
            raise _single_row_error(len(targets))

        changes = copy.deepcopy(dict(values))
        for row in targets:
            self._check_unique(table, {**row, **changes}, ignore=row)
        for row in targets:
            row.update(changes)
            row["updated_at"] = _now()
        return copy.deepcopy(targets)

    async def delete(self, table: str, match: Mapping[str, Any], *, single: bool = True) -> list[Row]:
        rows = self._tables.get(table, [])
        targets = [row for row in rows if _matches(row, match)]
        if single and len(targets) != 1:
            raise _single_row_error(len(targets))

        self._tables[table] = [row for row in rows if not any(row is target for target in targets)]
        return copy.deepcopy(targets)

    async def select(self, table: str, match: Optional[Mapping[str, Any]] = None) -> list[Row]:
        return [copy.deepcopy(row) for row in self._tables.get(table, []) if _matches(row, match)]

    async def get_user(self, access_token: str) -> Optional[Actor]:
        email = self._sessions.get(access_token)
        if email is None or email not in self._accounts:
            return None
        return Actor.from_session_user(self._accounts[email])

    async def update_user_metadata(self, email: str, metadata: Mapping[str, Any]) -> Row:
        account = self._accounts.get(email.strip().lower())
        if account is None:
            raise StoreError(message="User not found", code="user_not_found")
        account["user_metadata"] = {**account["user_metadata"], **copy.deepcopy(dict(metadata))}
        return copy.deepcopy(account)
