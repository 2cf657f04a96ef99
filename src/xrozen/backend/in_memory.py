"""In-memory conversation store.

Simple dict-based storage for tests and offline sessions.
Data is lost when the process exits.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from .base import ConversationStore
from .models import Conversation, Message, Role, utcnow


class InMemoryConversationStore(ConversationStore):
    """Dict-backed store (session-only).

    Like the hosted tables, deleting a conversation does not delete its
    messages; callers remove messages first.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, list[Message]] = {}

    async def connect(self) -> None:
        """Open the store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close the store (no-op for in-memory)."""
        pass

    def add_conversation(self, conversation: Conversation) -> Conversation:
        """Seed a conversation record as-is."""
        self._conversations[conversation.id] = conversation
        return conversation

    def add_message(self, message: Message) -> Message:
        """Seed a message record as-is."""
        if message.conversation_id is None:
            raise ValueError("Stored messages need a conversation_id")
        self._messages.setdefault(message.conversation_id, []).append(message)
        return message

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        owned = [c for c in self._conversations.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.updated_at, reverse=True)

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def insert_conversation(self, user_id: str, title: str) -> Conversation:
        now = self._clock()
        conversation = Conversation(
            id=str(uuid4()), user_id=user_id, title=title, updated_at=now, created_at=now
        )
        return self.add_conversation(conversation)

    async def touch_conversation(
        self, conversation_id: str, title: str | None = None
    ) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None
        update: dict = {"updated_at": self._clock()}
        if title is not None:
            update["title"] = title
        return self.add_conversation(conversation.model_copy(update=update))

    async def delete_conversation(self, conversation_id: str) -> bool:
        return self._conversations.pop(conversation_id, None) is not None

    async def list_messages(self, conversation_id: str) -> list[Message]:
        return sorted(self._messages.get(conversation_id, []), key=lambda m: m.created_at)

    async def insert_message(self, conversation_id: str, role: Role, content: str) -> Message:
        message = Message(
            id=str(uuid4()),
            conversation_id=conversation_id,
            role=role,
            content=content,
            created_at=self._clock(),
        )
        return self.add_message(message)

    async def delete_messages(self, conversation_id: str) -> int:
        return len(self._messages.pop(conversation_id, []))

    @property
    def backend_type(self) -> str:
        return "memory"
