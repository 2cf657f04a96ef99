from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse


class LLMProvider(ABC):
    """Text generator behind the local assistant function.

    Hides which hosted model answers a turn:
    - Client construction and API keys
    - Conversion to the provider's message format
    - Translation of provider failures into TransportError, so a failed
      completion rolls the send back like any other backend failure

    Usable as an async context manager; leaving the block closes the client.
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model used for every completion."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Produce the next assistant turn for ``messages``.

        Raises:
            TransportError: If the provider cannot be reached or rejects the call
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP client."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may report a closed loop when the client is torn down at exit
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
