"""Abstract interfaces of the hosted backend.

The session manager talks to the backend only through these classes.
The abstraction hides:
- Where records live (hosted REST tables, SQLite file, process memory)
- How the current user is resolved
- Connection management and wire formats

Every implementation reports failures as ``TransportError`` and treats
the store as consistent and immediately readable: no retries, no
transactions.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import Conversation, Message, Role, User


class IdentityProvider(ABC):
    """Resolves the signed-in user."""

    @abstractmethod
    async def get_current_user(self) -> User | None:
        """Return the current user, or None if nobody is signed in.

        Raises:
            TransportError: If the identity service cannot be reached
        """

    async def close(self) -> None:
        """Release any open connections."""


class ConversationStore(ABC):
    """Conversation and message tables.

    Supports the async context manager protocol:
        async with store:
            conversations = await store.list_conversations(user_id)
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def list_conversations(self, user_id: str) -> list[Conversation]:
        """Conversations owned by ``user_id``, most recently updated first."""

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Fetch one conversation by id."""

    @abstractmethod
    async def insert_conversation(self, user_id: str, title: str) -> Conversation:
        """Create a conversation and return the stored record."""

    @abstractmethod
    async def touch_conversation(
        self, conversation_id: str, title: str | None = None
    ) -> Conversation | None:
        """Bump ``updated_at`` (and optionally rename). None if it does not exist."""

    @abstractmethod
    async def delete_conversation(self, conversation_id: str) -> bool:
        """Delete the conversation row only; messages are not cascaded.

        Returns:
            True if a row was deleted
        """

    @abstractmethod
    async def list_messages(self, conversation_id: str) -> list[Message]:
        """Messages of a conversation, oldest first."""

    @abstractmethod
    async def insert_message(self, conversation_id: str, role: Role, content: str) -> Message:
        """Append a message and return the stored record."""

    @abstractmethod
    async def delete_messages(self, conversation_id: str) -> int:
        """Delete every message of a conversation; returns the count."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Backend type identifier."""

    async def __aenter__(self) -> "ConversationStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()


class StaticIdentityProvider(IdentityProvider):
    """Always reports the same user. Used with local stores."""

    def __init__(self, user_id: str | None, email: str | None = None):
        self._user = User(id=user_id, email=email) if user_id else None

    async def get_current_user(self) -> User | None:
        return self._user
