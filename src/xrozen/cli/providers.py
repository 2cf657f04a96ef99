"""Provider factory functions for CLI.

Centralizes creation of the identity provider, conversation store and
assistant function from environment variables. Hides configuration details
from command implementations.
"""

import os
from dataclasses import dataclass
from typing import Any

from rich.console import Console

from ..assistant import AssistantFunction, UnavailableAssistantFunction, create_assistant_function
from ..assistant.remote import DEFAULT_FUNCTION_NAME
from ..backend import (
    ConversationStore,
    HostedClient,
    IdentityProvider,
    create_conversation_store,
    create_identity_provider,
)
from ..errors import ConfigurationError
from ..llm import LLMProvider, create_llm_provider

# Default console for output
_console = Console(stderr=True)

DEFAULT_BACKEND = "sqlite"
DEFAULT_SQLITE_PATH = "./xrozen.db"
DEFAULT_USER_ID = "local-user"


def get_backend() -> str:
    """Store backend named by XROZEN_BACKEND (memory, sqlite or rest)."""
    return os.getenv("XROZEN_BACKEND", DEFAULT_BACKEND).strip().lower()


def get_hosted_client() -> HostedClient:
    """Create the shared HTTP client for the hosted backend.

    Raises:
        ConfigurationError: If XROZEN_URL or XROZEN_ANON_KEY is not set

    Environment variables:
        XROZEN_URL: Hosted project URL (required)
        XROZEN_ANON_KEY: Public API key (required)
        XROZEN_ACCESS_TOKEN: Signed-in user's session token
    """
    url = os.getenv("XROZEN_URL")
    api_key = os.getenv("XROZEN_ANON_KEY")
    if not url or not api_key:
        raise ConfigurationError("XROZEN_URL and XROZEN_ANON_KEY must be set for the rest backend")
    return HostedClient(url, api_key, access_token=os.getenv("XROZEN_ACCESS_TOKEN") or None)


def get_identity(client: HostedClient | None = None) -> IdentityProvider:
    """Create the identity provider.

    With a hosted client the signed-in user comes from the access token;
    otherwise XROZEN_USER_ID (default: local-user) is used as-is.
    """
    if client is not None:
        return create_identity_provider("rest", client=client)
    return create_identity_provider("static", user_id=os.getenv("XROZEN_USER_ID", DEFAULT_USER_ID))


def get_store(backend: str, client: HostedClient | None = None) -> ConversationStore:
    """Create the conversation store (not yet connected).

    Environment variables:
        XROZEN_SQLITE_PATH: SQLite file (default: ./xrozen.db)
    """
    if backend == "sqlite":
        return create_conversation_store(
            "sqlite", path=os.getenv("XROZEN_SQLITE_PATH", DEFAULT_SQLITE_PATH)
        )
    if backend == "rest":
        return create_conversation_store("rest", client=client)
    return create_conversation_store(backend)


def get_llm(console: Console | None = None) -> LLMProvider | None:
    """Create LLM provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        LLM provider instance, or None if not configured

    Environment variables:
        LLM_PROVIDER: Provider type (openai, deepseek; default: openai)
        OPENAI_API_KEY: OpenAI API key (for openai provider)
        OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o-mini)
        DEEPSEEK_API_KEY: DeepSeek API key (for deepseek provider)
        DEEPSEEK_CHAT_MODEL: DeepSeek model (default: deepseek-chat)
    """
    con = console or _console
    llm_provider = os.getenv("LLM_PROVIDER", "openai").lower()

    if llm_provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: OPENAI_API_KEY not set, sending is disabled[/yellow]")
            return None
        model = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
        return create_llm_provider("openai", api_key=api_key, model=model)

    elif llm_provider == "deepseek":
        api_key = os.getenv("DEEPSEEK_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: DEEPSEEK_API_KEY not set, sending is disabled[/yellow]")
            return None
        return create_llm_provider(
            "deepseek", api_key=api_key, model=os.getenv("DEEPSEEK_CHAT_MODEL") or None
        )

    con.print(f"[red]Error: Unknown LLM provider: {llm_provider}[/red]")
    return None


def get_assistant(
    store: ConversationStore,
    client: HostedClient | None = None,
    console: Console | None = None,
) -> AssistantFunction:
    """Create the assistant function.

    XROZEN_ASSISTANT selects "rest" (hosted edge function, named by
    XROZEN_FUNCTION_NAME) or "llm" (local LLM writing to ``store``). The
    default is "rest" with a hosted client and "llm" otherwise. When the
    LLM is not configured, sends fail with an explanatory error.
    """
    kind = os.getenv("XROZEN_ASSISTANT", "rest" if client is not None else "llm").lower()

    if kind == "rest":
        if client is None:
            raise ConfigurationError("XROZEN_ASSISTANT=rest requires XROZEN_BACKEND=rest")
        return create_assistant_function(
            "rest",
            client=client,
            function_name=os.getenv("XROZEN_FUNCTION_NAME", DEFAULT_FUNCTION_NAME),
        )

    if kind == "llm":
        llm = get_llm(console)
        if llm is None:
            return UnavailableAssistantFunction(
                "LLM provider not configured (set OPENAI_API_KEY or DEEPSEEK_API_KEY)"
            )
        return create_assistant_function("llm", llm=llm, store=store)

    raise ConfigurationError(f"Unsupported assistant: {kind}. Supported assistants: rest, llm")


@dataclass
class Services:
    """Collaborators for one CLI invocation.

    Use as an async context manager: the store is connected on entry and
    everything is closed on exit.
    """

    identity: IdentityProvider
    store: ConversationStore
    assistant: AssistantFunction
    client: HostedClient | None = None

    async def __aenter__(self) -> "Services":
        await self.store.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the assistant, store, identity provider and HTTP client."""
        await self.assistant.close()
        await self.store.disconnect()
        await self.identity.close()
        if self.client is not None:
            await self.client.close()


def build_services(console: Console | None = None) -> Services:
    """Create every collaborator from the environment.

    Raises:
        ConfigurationError: If the backend selection or its settings are invalid
    """
    backend = get_backend()
    client = get_hosted_client() if backend == "rest" else None
    store = get_store(backend, client)
    return Services(
        identity=get_identity(client),
        store=store,
        assistant=get_assistant(store, client, console),
        client=client,
    )
