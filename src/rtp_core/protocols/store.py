"""Store protocol: the hosted relational backend as an opaque CRUD API."""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from rtp_core.schema.actor import Actor

Row = dict[str, Any]


@runtime_checkable
class Store(Protocol):
    """
    Table-level CRUD keyed by equality filters. Every call returns the
    affected rows. With `single=True` exactly one row must be affected,
    otherwise a StoreError is raised and nothing is reported as success.
    """

    async def insert(self, table: str, values: Mapping[str, Any], *, single: bool = True) -> list[Row]:
        ...

    async def update(
        self, table: str, values: Mapping[str, Any], match: Mapping[str, Any], *, single: bool = True
    ) -> list[Row]:
        ...

    async def delete(self, table: str, match: Mapping[str, Any], *, single: bool = True) -> list[Row]:
        ...

    async def select(self, table: str, match: Optional[Mapping[str, Any]] = None) -> list[Row]:
        ...

    async def get_user(self, access_token: str) -> Optional[Actor]:
        """Resolve a session token to its actor, or None if the session is invalid."""
        ...

    async def update_user_metadata(self, email: str, metadata: Mapping[str, Any]) -> Row:
        """Merge `metadata` into the account's session metadata. Unknown email is a StoreError."""
        ...
