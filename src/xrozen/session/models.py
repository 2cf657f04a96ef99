"""Session state and send outcomes.

SessionState is the transient, in-process view the UI renders; it is
immutable and only ever replaced by the functions in ``reconcile``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..assistant.models import HistoryEntry
from ..backend.models import Conversation, Message


class SessionState(BaseModel):
    """Client-side view of the chat screen.

    At rest (``pending`` is False) ``messages`` matches the stored messages
    of ``selected_id`` in timestamp order. While a send is pending the tail
    of ``messages`` is the optimistic user message whose id is
    ``pending_message_id``.
    """

    model_config = ConfigDict(frozen=True)

    conversations: tuple[Conversation, ...] = ()
    selected_id: str | None = None
    messages: tuple[Message, ...] = ()
    pending: bool = False
    pending_message_id: str | None = None

    @property
    def selected_conversation(self) -> Conversation | None:
        """The selected conversation record, if it is in the list."""
        for conversation in self.conversations:
            if conversation.id == self.selected_id:
                return conversation
        return None

    def history(self) -> list[HistoryEntry]:
        """Role/content pairs of every message except the optimistic one."""
        return [
            HistoryEntry(role=message.role, content=message.content)
            for message in self.messages
            if message.id != self.pending_message_id
        ]


class Committed(BaseModel):
    """The assistant replied; the optimistic message was kept."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["committed"] = "committed"
    temp_id: str = Field(description="Temporary id the optimistic message carried")
    user_message: Message = Field(description="The user message under its permanent id")
    assistant_message: Message
    action_payload: str | None = Field(default=None, description="Raw embedded action block, if any")
    created_conversation: Conversation | None = Field(
        default=None, description="Conversation created lazily for this send"
    )


class RolledBack(BaseModel):
    """The send failed; the optimistic message was removed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rolled_back"] = "rolled_back"
    temp_id: str
    reason: str
    auth_expired: bool = False
    created_conversation: Conversation | None = Field(
        default=None, description="Conversation created before the failure; it stays selected"
    )


class Rejected(BaseModel):
    """The send was ignored before anything changed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    reason: Literal["empty", "pending"]


SendOutcome = Annotated[Committed | RolledBack | Rejected, Field(discriminator="kind")]
