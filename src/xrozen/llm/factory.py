from typing import Any

from ..errors import ConfigurationError
from .base import LLMProvider
from .providers import DeepSeekProvider, OpenAIProvider

PROVIDERS: dict[str, type[OpenAIProvider]] = {
    "openai": OpenAIProvider,
    "deepseek": DeepSeekProvider,
}


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create the LLM provider used by the local assistant function.

    Args:
        provider: Provider name, case-insensitive ('openai' or 'deepseek')
        **config: Constructor arguments; ``api_key`` is required, ``model``
            and ``base_url`` override the provider defaults

    Raises:
        ConfigurationError: If the provider is unknown or ``api_key`` is missing

    Example:
        >>> llm = create_llm_provider("deepseek", api_key="sk-...")
        >>> llm.model
        'deepseek-chat'
    """
    provider_class = PROVIDERS.get(provider.lower())
    if provider_class is None:
        raise ConfigurationError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(PROVIDERS)}"
        )
    if not config.get("api_key"):
        raise ConfigurationError(f"{provider_class.__name__} requires 'api_key' in config")
    return provider_class(**config)
