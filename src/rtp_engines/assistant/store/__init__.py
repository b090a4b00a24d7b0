"""Store backends for the assistant engine."""

from __future__ import annotations

from loguru import logger

from rtp_core.config import Settings
from rtp_core.logging_utils import log_event
from rtp_core.protocols.store import Store

from .memory import InMemoryStore
from .supabase import SupabaseStore


def build_store(config: Settings) -> Store:
    backend = (config.STORE_BACKEND or "").strip().lower()
    if backend == "memory":
        logger.warning(log_event("store.backend.selected", backend="memory", persistent=False))
        return InMemoryStore()
    if backend == "supabase":
        logger.info(log_event("store.backend.selected", backend="supabase", url=config.SUPABASE_URL))
        return SupabaseStore(
            config.SUPABASE_URL,
            config.SUPABASE_SERVICE_KEY,
            timeout=config.STORE_TIMEOUT_SECONDS,
        )
    raise ValueError(f"Unknown STORE_BACKEND {config.STORE_BACKEND!r}; expected 'supabase' or 'memory'.")


__all__ = ["InMemoryStore", "SupabaseStore", "build_store"]
