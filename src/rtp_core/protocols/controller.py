# src/rtp_core/protocols/controller.py
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from rtp_core.schema.request import ImageBlob


class BaseChatController(ABC):
    """
    Chat controller base class.
    Orchestrates the operator's messages, the pending-action checkpoint and
    the transcript on the client side.
    """

    def __init__(self, client: Any):
        self.client = client

    @abstractmethod
    async def handle_send(self, text: str, images: Sequence[ImageBlob] = ()) -> Optional[Any]:
        """Standard flow for one operator message."""
        pass

    @abstractmethod
    async def confirm(self) -> Optional[Any]:
        """Execute the pending action exactly as it was previewed."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Drop the pending action without contacting the server."""
        pass
