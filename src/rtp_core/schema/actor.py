from __future__ import annotations

from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel

Role = Literal["customer", "employee", "admin"]

_ROLE_RANK: dict[str, int] = {"customer": 0, "employee": 1, "admin": 2}


def role_at_least(role: str, minimum: str) -> bool:
    return _ROLE_RANK.get(role, -1) >= _ROLE_RANK[minimum]


class Actor(BaseModel):
    """The authenticated person behind a request. Role comes from session metadata only."""

    id: str
    email: str
    name: Optional[str] = None
    role: Role = "customer"

    @classmethod
    def from_session_user(cls, user: dict[str, Any]) -> "Actor":
        metadata = user.get("user_metadata") or {}
        role = str(metadata.get("role") or "").strip().lower()
        if role not in get_args(Role):
            role = "customer"
        return cls(
            id=str(user.get("id") or ""),
            email=str(user.get("email") or ""),
            name=metadata.get("name") or None,
            role=role,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.email

