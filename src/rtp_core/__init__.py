"""
rtp-core: shared plumbing for the RTP staff assistant.

Configuration, logging, pydantic schema, the narrow protocols for the model
oracle and the store, and the Gemini-backed intent resolver.
"""

__version__ = "0.3.0"
