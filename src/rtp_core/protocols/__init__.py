"""Narrow interfaces for the external collaborators: model oracle, store, reporters."""

from rtp_core.protocols.controller import BaseChatController
from rtp_core.protocols.reporter import Reporter
from rtp_core.protocols.resolver import IntentResolver
from rtp_core.protocols.store import Store

__all__ = ["BaseChatController", "IntentResolver", "Reporter", "Store"]
