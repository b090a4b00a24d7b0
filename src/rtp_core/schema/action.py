"""Action models: what the oracle proposes and what the dispatcher returns."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProposedAction(BaseModel):
    """
    A named, parameterized mutation request produced by the intent resolver.
    On the wire the name travels as `function`.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="function", description="Catalog function name.")
    arguments: dict[str, Any] = Field(default_factory=dict)

    def wire(self) -> dict[str, Any]:
        return {"function": self.name, "arguments": self.arguments}


class ConfirmedAction(ProposedAction):
    """Same shape as a proposal; only ever built from an explicit execute request."""


class ActionResult(BaseModel):
    type: Literal["success", "error"]
    message: str
    link: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    @classmethod
    def success(cls, message: str, *, link: str | None = None, data: dict[str, Any] | None = None) -> "ActionResult":
        return cls(type="success", message=message, link=link, data=data)

    @classmethod
    def error(cls, message: str) -> "ActionResult":
        return cls(type="error", message=message)

    @property
    def ok(self) -> bool:
        return self.type == "success"


class Resolution(BaseModel):
    """Resolver output: exactly one of `text` or `proposed_action` is set."""

    text: Optional[str] = None
    proposed_action: Optional[ProposedAction] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Resolution":
        if (self.text is None) == (self.proposed_action is None):
            raise ValueError("Resolution must carry either text or a proposed action, not both or neither.")
        return self
