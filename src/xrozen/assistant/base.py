"""Abstract assistant function.

Hides where the assistant runs (hosted edge function or a local LLM) and
how it is reached. Implementations raise TransportError on any failure,
including replies that do not match AssistantResponse.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..errors import ConfigurationError
from .models import AssistantRequest, AssistantResponse


class AssistantFunction(ABC):
    """Stateless request/response assistant call."""

    @abstractmethod
    async def invoke(self, request: AssistantRequest) -> AssistantResponse:
        """Send one user message with its conversation context.

        Raises:
            TransportError: If the call fails or the reply is malformed
        """

    async def close(self) -> None:
        """Release any open connections."""

    async def __aenter__(self) -> "AssistantFunction":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class UnavailableAssistantFunction(AssistantFunction):
    """Placeholder used when no assistant is configured.

    Lets read-only sessions (listing, deleting) run without LLM settings;
    any send fails with the configuration problem as its reason.
    """

    def __init__(self, reason: str):
        self.reason = reason

    async def invoke(self, request: AssistantRequest) -> AssistantResponse:
        raise ConfigurationError(self.reason)
