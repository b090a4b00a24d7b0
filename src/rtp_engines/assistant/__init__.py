"""AI action assistant: propose -> preview -> confirm -> execute."""

from .catalog import CATALOG_VERSION, get_schema, list_schemas
from .dispatcher import ActionDispatcher, DispatchOutcome
from .preview import format_preview, proposal_message
from .router import router

__all__ = [
    "CATALOG_VERSION",
    "ActionDispatcher",
    "DispatchOutcome",
    "format_preview",
    "get_schema",
    "list_schemas",
    "proposal_message",
    "router",
]
