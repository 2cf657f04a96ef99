"""Hosted REST backend: auth user lookup and PostgREST-style tables.

Requests follow the hosted project's conventions:
- Tables under ``/rest/v1/<table>`` with ``eq.`` filters and
  ``order=<column>.asc|desc``
- ``Prefer: return=representation`` so writes echo the stored rows
- The signed-in user under ``/auth/v1/user``
"""

import logging
from typing import Any

from pydantic import ValidationError

from ..errors import TransportError
from .base import ConversationStore, IdentityProvider
from .http import HostedClient
from .models import Conversation, Message, Role, User, utcnow

logger = logging.getLogger(__name__)

CONVERSATIONS_TABLE = "ai_conversations"
MESSAGES_TABLE = "ai_messages"

_RETURN_ROWS = {"Prefer": "return=representation"}


def _eq(value: str) -> str:
    return f"eq.{value}"


def _parse_rows(model: type, rows: Any) -> list:
    if not isinstance(rows, list):
        raise TransportError(f"Expected a list of rows, got {type(rows).__name__}")
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as e:
        raise TransportError(f"Malformed {model.__name__} row: {e}") from e


class RestIdentityProvider(IdentityProvider):
    """Looks up the user owning the client's access token."""

    def __init__(self, client: HostedClient):
        self._client = client

    async def get_current_user(self) -> User | None:
        if not self._client.access_token:
            return None
        try:
            response = await self._client.request("GET", "/auth/v1/user")
        except TransportError as e:
            if e.status_code in (401, 403):
                logger.info("Session token rejected (%s)", e.status_code)
                return None
            raise
        try:
            return User.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(f"Malformed user response: {e}") from e


class RestConversationStore(ConversationStore):
    """Conversation store backed by the hosted REST tables.

    The HTTP client is shared with the other hosted collaborators and is
    closed by whoever created it.
    """

    def __init__(
        self,
        client: HostedClient,
        conversations_table: str = CONVERSATIONS_TABLE,
        messages_table: str = MESSAGES_TABLE,
    ):
        self._client = client
        self._conversations = f"/rest/v1/{conversations_table}"
        self._messages = f"/rest/v1/{messages_table}"

    async def connect(self) -> None:
        """Nothing to open; requests are made on demand."""
        pass

    async def disconnect(self) -> None:
        """Nothing to close; the shared client is closed by its owner."""
        pass

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{method} {path} returned invalid JSON") from e

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        rows = await self._json(
            "GET",
            self._conversations,
            params={"select": "*", "user_id": _eq(user_id), "order": "updated_at.desc"},
        )
        return _parse_rows(Conversation, rows)

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        rows = await self._json(
            "GET",
            self._conversations,
            params={"select": "*", "id": _eq(conversation_id)},
        )
        conversations = _parse_rows(Conversation, rows)
        return conversations[0] if conversations else None

    async def insert_conversation(self, user_id: str, title: str) -> Conversation:
        rows = await self._json(
            "POST",
            self._conversations,
            json={"user_id": user_id, "title": title},
            headers=_RETURN_ROWS,
        )
        conversations = _parse_rows(Conversation, rows)
        if not conversations:
            raise TransportError("Conversation insert returned no row")
        return conversations[0]

    async def touch_conversation(
        self, conversation_id: str, title: str | None = None
    ) -> Conversation | None:
        body: dict[str, Any] = {"updated_at": utcnow().isoformat()}
        if title is not None:
            body["title"] = title
        rows = await self._json(
            "PATCH",
            self._conversations,
            params={"id": _eq(conversation_id)},
            json=body,
            headers=_RETURN_ROWS,
        )
        conversations = _parse_rows(Conversation, rows)
        return conversations[0] if conversations else None

    async def delete_conversation(self, conversation_id: str) -> bool:
        rows = await self._json(
            "DELETE",
            self._conversations,
            params={"id": _eq(conversation_id)},
            headers=_RETURN_ROWS,
        )
        return bool(rows)

    async def list_messages(self, conversation_id: str) -> list[Message]:
        rows = await self._json(
            "GET",
            self._messages,
            params={
                "select": "*",
                "conversation_id": _eq(conversation_id),
                "order": "created_at.asc",
            },
        )
        return _parse_rows(Message, rows)

    async def insert_message(self, conversation_id: str, role: Role, content: str) -> Message:
        rows = await self._json(
            "POST",
            self._messages,
            json={"conversation_id": conversation_id, "role": role.value, "content": content},
            headers=_RETURN_ROWS,
        )
        messages = _parse_rows(Message, rows)
        if not messages:
            raise TransportError("Message insert returned no row")
        return messages[0]

    async def delete_messages(self, conversation_id: str) -> int:
        rows = await self._json(
            "DELETE",
            self._messages,
            params={"conversation_id": _eq(conversation_id)},
            headers=_RETURN_ROWS,
        )
        return len(rows) if isinstance(rows, list) else 0

    @property
    def backend_type(self) -> str:
        return "rest"
