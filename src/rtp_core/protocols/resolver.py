"""Resolver protocol: the model oracle behind a narrow interface (prompt in, proposal or text out)."""

from typing import Protocol, Sequence, runtime_checkable

from rtp_core.schema.action import Resolution
from rtp_core.schema.actor import Actor
from rtp_core.schema.catalog import FunctionSchema
from rtp_core.schema.request import ImageBlob


@runtime_checkable
class IntentResolver(Protocol):
    """
    Interface for the decision layer: free text in, one proposal or a reply out.

    Implementations typically call Gemini with function declarations. Keeps
    the model call swappable, so tests can plug in a deterministic fake.
    """

    async def resolve(
        self,
        prompt_text: str,
        images: Sequence[ImageBlob],
        catalog: Sequence[FunctionSchema],
        actor: Actor,
    ) -> Resolution:
        """
        Map an operator message to a Resolution.

        Raises:
            ResolverError: the oracle failed or answered with something unusable.
        """
        ...
