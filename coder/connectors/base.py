from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from coder.models import Message, Response, Tool


class LLMConnector(ABC):
    """Blocking request/response channel to a language model."""

    def __init__(self, model: str, max_tokens: int = 1024, client: Any | None = None) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._client = client

    @abstractmethod
    def complete(self, messages: Sequence[Message], tools: Sequence[Tool] = ()) -> Response:
        """Send the whole transcript and return the model's next turn.

        Raises TransportError on any failure of the underlying client.
        """
        ...
