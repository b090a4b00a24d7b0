"""Model oracle integration (Gemini function calling)."""

from rtp_core.brain.gemini import GeminiIntentResolver

__all__ = ["GeminiIntentResolver"]
