"""Pure state transitions for the chat session.

Every function takes a SessionState and returns a new one; nothing here
awaits or touches a backend. The session manager performs the I/O and then
applies exactly one of these per completed operation, which keeps the
send state machine (Idle -> Pending -> Committed | RolledBack -> Idle)
testable without a UI or a network.
"""

from collections.abc import Iterable
from datetime import datetime

from ..backend.models import Conversation, Message
from .models import Committed, Rejected, RolledBack, SendOutcome, SessionState


def sort_messages(messages: Iterable[Message]) -> tuple[Message, ...]:
    """Order messages by creation time, oldest first (stable for ties)."""
    return tuple(sorted(messages, key=lambda m: m.created_at))


def sort_conversations(conversations: Iterable[Conversation]) -> tuple[Conversation, ...]:
    """Order conversations by last update, newest first (stable for ties)."""
    return tuple(sorted(conversations, key=lambda c: c.updated_at, reverse=True))


def replace_conversations(
    state: SessionState, conversations: Iterable[Conversation]
) -> SessionState:
    """Install a freshly loaded conversation list.

    A selection that is not in the new list is cleared along with its
    messages, unless a send is pending.
    """
    update: dict = {"conversations": tuple(conversations)}
    selected = state.selected_id
    if (
        selected is not None
        and not state.pending
        and all(c.id != selected for c in update["conversations"])
    ):
        update["selected_id"] = None
        update["messages"] = ()
    return state.model_copy(update=update)


def prepend_conversation(state: SessionState, conversation: Conversation) -> SessionState:
    """Put a new conversation at the head of the list and select it.

    The message list is left alone so an optimistic message created before
    the conversation existed stays visible.
    """
    others = tuple(c for c in state.conversations if c.id != conversation.id)
    return state.model_copy(
        update={
            "conversations": (conversation, *others),
            "selected_id": conversation.id,
        }
    )


def select(state: SessionState, conversation_id: str | None, messages: Iterable[Message]) -> SessionState:
    """Point the session at a conversation and show its messages."""
    return state.model_copy(
        update={"selected_id": conversation_id, "messages": sort_messages(messages)}
    )


def remove_conversation(state: SessionState, conversation_id: str) -> SessionState:
    """Drop a deleted conversation; clear the screen if it was selected."""
    update: dict = {
        "conversations": tuple(c for c in state.conversations if c.id != conversation_id),
    }
    if state.selected_id == conversation_id:
        update["selected_id"] = None
        update["messages"] = ()
    return state.model_copy(update=update)


def touch_conversation(
    state: SessionState, conversation_id: str, updated_at: datetime
) -> SessionState:
    """Mark a conversation as just updated and move it to the head of the list."""
    touched = None
    others = []
    for conversation in state.conversations:
        if conversation.id == conversation_id:
            touched = conversation.model_copy(update={"updated_at": updated_at})
        else:
            others.append(conversation)
    if touched is None:
        return state
    return state.model_copy(update={"conversations": (touched, *others)})


def begin_send(state: SessionState, optimistic: Message) -> SessionState:
    """Idle -> Pending: show the user's message before the backend confirms it."""
    if state.pending:
        raise ValueError("A send is already pending")
    return state.model_copy(
        update={
            "messages": (*state.messages, optimistic),
            "pending": True,
            "pending_message_id": optimistic.id,
        }
    )


def commit(state: SessionState, outcome: Committed) -> SessionState:
    """Pending -> Idle: keep the user message under its permanent id and
    append the assistant reply."""
    messages = tuple(
        outcome.user_message if message.id == outcome.temp_id else message
        for message in state.messages
    )
    return state.model_copy(
        update={
            "messages": (*messages, outcome.assistant_message),
            "pending": False,
            "pending_message_id": None,
        }
    )


def rollback(state: SessionState, outcome: RolledBack) -> SessionState:
    """Pending -> Idle: remove the optimistic message entirely."""
    return state.model_copy(
        update={
            "messages": tuple(m for m in state.messages if m.id != outcome.temp_id),
            "pending": False,
            "pending_message_id": None,
        }
    )


def apply_outcome(state: SessionState, outcome: SendOutcome) -> SessionState:
    """Apply the result of a send in one step."""
    if isinstance(outcome, Committed):
        return commit(state, outcome)
    if isinstance(outcome, RolledBack):
        return rollback(state, outcome)
    if isinstance(outcome, Rejected):
        return state
    raise TypeError(f"Unknown send outcome: {outcome!r}")
