"""HMAC signatures for proposals, so an execute request must echo exactly what was proposed."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

from rtp_core.errors import SignatureError
from rtp_core.schema.action import ProposedAction


def _normalize(value: Any) -> Any:
    """Whole floats canonicalize as ints, so `8.0` and `8` sign the same."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _normalize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    return value


class ActionSigner:
    """Signs `{function, arguments}` canonically. A signer without a key is disabled."""

    def __init__(self, key: str | None) -> None:
        self._key = (key or "").encode("utf-8")

    @property
    def enabled(self) -> bool:
        return bool(self._key)

    @staticmethod
    def canonical(action: ProposedAction) -> bytes:
        payload = _normalize(action.wire())
        return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def sign(self, action: ProposedAction) -> str | None:
        if not self.enabled:
            return None
        return hmac.new(self._key, self.canonical(action), hashlib.sha256).hexdigest()

    def verify(self, action: ProposedAction, signature: str | None) -> None:
        if not self.enabled:
            return
        if not signature:
            raise SignatureError("This action is missing its confirmation signature. Ask the assistant again.")
        expected = hmac.new(self._key, self.canonical(action), hashlib.sha256).hexdigest()
        if not hmac.compare_digest(expected, signature):
            raise SignatureError("This action does not match what was proposed. Ask the assistant again.")
