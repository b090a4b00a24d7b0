"""Exception hierarchy shared by the resolver, dispatcher, store and client gate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class AssistantError(Exception):
    """Base class for every assistant failure that should reach the operator."""


class ResolverError(AssistantError):
    """The model oracle failed, timed out or returned something unusable."""


@dataclass
class StoreError(AssistantError):
    message: str
    code: str | None = None
    details: Any = field(default=None)

    def __str__(self) -> str:
        return self.message


class ActionArgumentError(AssistantError):
    """Arguments for a catalog action are missing, mistyped or empty."""


class SignatureError(AssistantError):
    """A confirmed action does not carry a valid proposal signature."""


class GateStateError(AssistantError):
    """A confirmation gate transition was requested from the wrong state."""
