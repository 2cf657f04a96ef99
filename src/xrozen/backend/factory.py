"""Factories for backend collaborators."""

from typing import Any

from ..errors import ConfigurationError
from .base import ConversationStore, IdentityProvider, StaticIdentityProvider


def create_conversation_store(backend: str = "memory", **kwargs: Any) -> ConversationStore:
    """Create a conversation store.

    Args:
        backend: Store type ("memory", "sqlite" or "rest")
        **kwargs: Backend-specific configuration
            For sqlite:
                - path: str | Path (default: './xrozen.db')
            For rest:
                - client: HostedClient (required)
                - conversations_table / messages_table: str

    Returns:
        ConversationStore instance (not yet connected)

    Raises:
        ConfigurationError: If the backend type is not supported or required
            settings are missing
    """
    if backend == "memory":
        from .in_memory import InMemoryConversationStore
        return InMemoryConversationStore(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteConversationStore
        return SQLiteConversationStore(**kwargs)

    elif backend == "rest":
        if kwargs.get("client") is None:
            raise ConfigurationError("REST store requires a 'client'")
        from .rest import RestConversationStore
        return RestConversationStore(**kwargs)

    raise ConfigurationError(
        f"Unsupported store backend: {backend}. "
        f"Supported backends: memory, sqlite, rest"
    )


def create_identity_provider(backend: str = "static", **kwargs: Any) -> IdentityProvider:
    """Create an identity provider.

    Args:
        backend: Provider type ("static" or "rest")
        **kwargs: Provider-specific configuration
            For static:
                - user_id: str | None (required)
                - email: str | None
            For rest:
                - client: HostedClient (required)

    Raises:
        ConfigurationError: If the provider type is not supported
    """
    if backend == "static":
        return StaticIdentityProvider(**kwargs)

    elif backend == "rest":
        if kwargs.get("client") is None:
            raise ConfigurationError("REST identity provider requires a 'client'")
        from .rest import RestIdentityProvider
        return RestIdentityProvider(**kwargs)

    raise ConfigurationError(
        f"Unsupported identity backend: {backend}. "
        f"Supported backends: static, rest"
    )
