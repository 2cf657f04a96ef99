"""OpenAI Chat Completions providers (OpenAI and compatible endpoints)."""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from ...errors import TransportError
from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Provider for any endpoint speaking the Chat Completions API."""

    default_model = "gpt-4o-mini"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        organization: str | None = None,
        client: AsyncOpenAI | None = None,
        **client_kwargs: Any
    ):
        """Initialize the provider.

        Args:
            api_key: API key for the endpoint
            model: Model name (default: ``default_model``)
            base_url: Endpoint URL; None means api.openai.com
            organization: Optional OpenAI organization ID
            client: Pre-built client, used instead of creating one
            **client_kwargs: Passed through to AsyncOpenAI (timeout, max_retries, ...)
        """
        self._model = model or self.default_model
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self._model,
            "messages": [message.to_wire() for message in messages],
            "temperature": temperature,
        }
        if max_tokens is not None:
            request["max_tokens"] = max_tokens

        try:
            completion = await self._client.chat.completions.create(**request)
        except OpenAIError as e:
            logger.warning("Completion with %s failed: %s", self._model, e)
            raise TransportError(f"{self._model} request failed: {e}") from e

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens,
            }

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage,
        )

    async def close(self) -> None:
        await self._client.close()


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek through its OpenAI-compatible endpoint."""

    default_model = "deepseek-chat"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str = "https://api.deepseek.com",
        **client_kwargs: Any
    ):
        super().__init__(api_key=api_key, model=model, base_url=base_url, **client_kwargs)
