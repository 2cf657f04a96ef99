"""Factory for assistant functions."""

from typing import Any

from ..errors import ConfigurationError
from .base import AssistantFunction


def create_assistant_function(backend: str = "rest", **kwargs: Any) -> AssistantFunction:
    """Create an assistant function.

    Args:
        backend: Assistant type ("rest" or "llm")
        **kwargs: Backend-specific configuration
            For rest:
                - client: HostedClient (required)
                - function_name: str (default: 'xrozen-ai')
            For llm:
                - llm: LLMProvider (required)
                - store: ConversationStore (required)
                - system_prompt, temperature, max_history

    Raises:
        ConfigurationError: If the backend is unsupported or a required
            collaborator is missing
    """
    if backend == "rest":
        if kwargs.get("client") is None:
            raise ConfigurationError("REST assistant requires a 'client'")
        from .remote import RestAssistantFunction
        return RestAssistantFunction(**kwargs)

    elif backend == "llm":
        if kwargs.get("llm") is None or kwargs.get("store") is None:
            raise ConfigurationError("LLM assistant requires 'llm' and 'store'")
        from .local import LLMAssistantFunction
        return LLMAssistantFunction(**kwargs)

    raise ConfigurationError(
        f"Unsupported assistant backend: {backend}. "
        f"Supported backends: rest, llm"
    )
