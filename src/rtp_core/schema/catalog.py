"""Function catalog models: the contract handed to the model oracle."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from rtp_core.schema.actor import Role


class ParameterSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["object", "array", "string", "number", "boolean"]
    description: Optional[str] = None
    properties: Optional[dict[str, "ParameterSchema"]] = None
    items: Optional["ParameterSchema"] = None
    enum: Optional[list[str]] = None
    required: Optional[list[str]] = None


class FunctionSchema(BaseModel):
    """
    One callable action. `min_role` is the lowest actor role allowed to
    execute it; the dispatcher enforces it for every entry.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: ParameterSchema
    min_role: Role = Field(default="employee")

    def declaration(self) -> dict:
        """Plain-JSON function declaration (without the role requirement)."""
        return self.model_dump(include={"name", "description", "parameters"}, exclude_none=True)


ParameterSchema.model_rebuild()
