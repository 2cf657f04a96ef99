"""SQLite conversation store.

Persistent local stand-in for the hosted tables, using aiosqlite for
async access. The schema mirrors ``ai_conversations`` / ``ai_messages``
and deliberately declares no foreign-key cascade: the client removes
messages before their conversation.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import aiosqlite

from ..errors import TransportError
from .base import ConversationStore
from .models import Conversation, Message, Role, utcnow

logger = logging.getLogger(__name__)


def _to_text(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _conversation_from_row(row: aiosqlite.Row) -> Conversation:
    return Conversation(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        updated_at=_from_text(row["updated_at"]),
        created_at=_from_text(row["created_at"]),
    )


def _message_from_row(row: aiosqlite.Row) -> Message:
    return Message(
        id=row["id"],
        conversation_id=row["conversation_id"],
        role=Role(row["role"]),
        content=row["content"],
        created_at=_from_text(row["created_at"]),
    )


class SQLiteConversationStore(ConversationStore):
    """SQLite-backed conversation store.

    Stores conversations and messages in a single database file that
    survives restarts.
    """

    def __init__(
        self,
        path: str | Path = "./xrozen.db",
        clock: Callable[[], datetime] = utcnow,
    ):
        self._db_path = Path(path)
        self._clock = clock
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database file and create the schema."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._db_path)
            self._connection.row_factory = aiosqlite.Row
            await self._create_schema()
        except (OSError, aiosqlite.Error) as e:
            raise TransportError(f"Cannot open SQLite store at {self._db_path}: {e}") from e
        logger.debug("SQLite store opened at %s", self._db_path)

    async def _create_schema(self) -> None:
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS ai_conversations (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS ai_messages (
                id TEXT PRIMARY KEY,
                conversation_id TEXT NOT NULL,
                role TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
                content TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        await self._connection.execute("""
            CREATE INDEX IF NOT EXISTS idx_ai_conversations_user
            ON ai_conversations(user_id, updated_at)
        """)

        await self._connection.execute("""
            CREATE INDEX IF NOT EXISTS idx_ai_messages_conversation
            ON ai_messages(conversation_id, created_at)
        """)

        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise TransportError("SQLite store is not connected")
        return self._connection

    async def _fetchall(self, sql: str, params: tuple) -> list[aiosqlite.Row]:
        connection = self._require_connection()
        try:
            async with connection.execute(sql, params) as cursor:
                return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            raise TransportError(f"SQLite query failed: {e}") from e

    async def _write(self, sql: str, params: tuple) -> int:
        connection = self._require_connection()
        try:
            cursor = await connection.execute(sql, params)
            await connection.commit()
            return cursor.rowcount
        except aiosqlite.Error as e:
            raise TransportError(f"SQLite write failed: {e}") from e

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        rows = await self._fetchall(
            """
            SELECT id, user_id, title, created_at, updated_at
            FROM ai_conversations
            WHERE user_id = ?
            ORDER BY updated_at DESC, rowid DESC
            """,
            (user_id,),
        )
        return [_conversation_from_row(row) for row in rows]

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        rows = await self._fetchall(
            "SELECT id, user_id, title, created_at, updated_at FROM ai_conversations WHERE id = ?",
            (conversation_id,),
        )
        return _conversation_from_row(rows[0]) if rows else None

    async def insert_conversation(self, user_id: str, title: str) -> Conversation:
        now = self._clock()
        conversation = Conversation(
            id=str(uuid4()), user_id=user_id, title=title, updated_at=now, created_at=now
        )
        await self._write(
            """
            INSERT INTO ai_conversations (id, user_id, title, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (conversation.id, user_id, title, _to_text(now), _to_text(now)),
        )
        return conversation

    async def touch_conversation(
        self, conversation_id: str, title: str | None = None
    ) -> Conversation | None:
        now = _to_text(self._clock())
        if title is None:
            await self._write(
                "UPDATE ai_conversations SET updated_at = ? WHERE id = ?",
                (now, conversation_id),
            )
        else:
            await self._write(
                "UPDATE ai_conversations SET updated_at = ?, title = ? WHERE id = ?",
                (now, title, conversation_id),
            )
        return await self.get_conversation(conversation_id)

    async def delete_conversation(self, conversation_id: str) -> bool:
        deleted = await self._write(
            "DELETE FROM ai_conversations WHERE id = ?", (conversation_id,)
        )
        return deleted > 0

    async def list_messages(self, conversation_id: str) -> list[Message]:
        rows = await self._fetchall(
            """
            SELECT id, conversation_id, role, content, created_at
            FROM ai_messages
            WHERE conversation_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (conversation_id,),
        )
        return [_message_from_row(row) for row in rows]

    async def insert_message(self, conversation_id: str, role: Role, content: str) -> Message:
        message = Message(
            id=str(uuid4()),
            conversation_id=conversation_id,
            role=role,
            content=content,
            created_at=self._clock(),
        )
        await self._write(
            """
            INSERT INTO ai_messages (id, conversation_id, role, content, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (message.id, conversation_id, role.value, content, _to_text(message.created_at)),
        )
        return message

    async def delete_messages(self, conversation_id: str) -> int:
        return await self._write(
            "DELETE FROM ai_messages WHERE conversation_id = ?", (conversation_id,)
        )

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
