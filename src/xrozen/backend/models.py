"""Records stored by the hosted backend.

These mirror the rows of the ``ai_conversations`` and ``ai_messages``
tables and the auth user, independent of which store serves them.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class User(BaseModel):
    """The signed-in user, identified solely by id."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None


class Conversation(BaseModel):
    """A titled thread owned by one user."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque conversation identifier")
    user_id: str = Field(description="Owning user identifier")
    title: str = Field(description="Display title")
    updated_at: datetime = Field(default_factory=utcnow, description="Last activity time")
    created_at: datetime | None = Field(default=None, description="Creation time, if reported")


class Message(BaseModel):
    """A single chat message. Never edited once persisted."""

    model_config = ConfigDict(frozen=True)

    id: str
    conversation_id: str | None = Field(
        default=None,
        description="Owning conversation; None only for an optimistic message sent before one exists",
    )
    role: Role
    content: str
    created_at: datetime = Field(default_factory=utcnow)
