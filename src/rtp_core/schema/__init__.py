"""Pydantic models for data consistency across resolver, dispatcher and client."""

from rtp_core.schema.action import ActionResult, ConfirmedAction, ProposedAction, Resolution
from rtp_core.schema.actor import Actor, Role, role_at_least
from rtp_core.schema.catalog import FunctionSchema, ParameterSchema
from rtp_core.schema.request import ActionEnvelope, AssistantRequest, ImageBlob

__all__ = [
    "ActionEnvelope",
    "ActionResult",
    "Actor",
    "AssistantRequest",
    "ConfirmedAction",
    "FunctionSchema",
    "ImageBlob",
    "ParameterSchema",
    "ProposedAction",
    "Resolution",
    "Role",
    "role_at_least",
]
