"""Conversation Session Manager.

Coordinates the identity provider, the conversation store and the
assistant function on behalf of one chat screen:

- load the user's conversations and open the most recent one
- switch, create and delete conversations
- send a message optimistically and reconcile it with the reply

Collaborator failures never escape: they are logged, shown through the
Notifier, and the session goes back to idle. Every state change is one
pure transition from ``reconcile`` applied after an await completes.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from ..assistant.base import AssistantFunction
from ..assistant.models import AssistantRequest
from ..backend.base import ConversationStore, IdentityProvider
from ..backend.models import Conversation, Message, Role, User, utcnow
from ..errors import AuthExpiredError, TransportError, XrozenError
from . import reconcile
from .actions import extract_action_payload
from .models import Committed, Rejected, RolledBack, SendOutcome, SessionState
from .notifications import NullNotifier, Notifier

logger = logging.getLogger(__name__)

DEFAULT_CONVERSATION_TITLE = "New Conversation"
TITLE_LENGTH = 50

StateListener = Callable[[SessionState], None]


def temporary_id() -> str:
    """Identifier for a message that has not been confirmed yet."""
    return f"temp-{uuid4().hex}"


class ConversationSessionManager:
    """Client-side state for one chat screen.

    Only one send may be pending at a time; while it is, sends are rejected
    and selection, creation and deletion are ignored.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        store: ConversationStore,
        assistant: AssistantFunction,
        notifier: Notifier | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
        on_auth_expired: Callable[[], None] | None = None,
    ):
        self._identity = identity
        self._store = store
        self._assistant = assistant
        self._notifier = notifier or NullNotifier()
        self._clock = clock
        self._on_auth_expired = on_auth_expired
        self._state = SessionState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        """Current session state (immutable snapshot)."""
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new state; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    async def _require_user(self) -> User:
        user = await self._identity.get_current_user()
        if user is None:
            raise AuthExpiredError()
        return user

    def _auth_expired(self) -> None:
        logger.warning("No signed-in user")
        if self._on_auth_expired is not None:
            self._on_auth_expired()

    def _ignored_while_pending(self, operation: str) -> bool:
        if self._state.pending:
            logger.warning("Ignoring %s while a message is being sent", operation)
            return True
        return False

    async def load(self) -> list[Conversation]:
        """Load the user's conversations and open the most recent one.

        Raises:
            AuthExpiredError: If nobody is signed in
        """
        try:
            user = await self._require_user()
        except TransportError as e:
            logger.error("Error resolving current user: %s", e)
            return []

        conversations = await self.list_conversations(user.id)
        if conversations and self._state.selected_id is None:
            await self.select_conversation(conversations[0].id)
        return conversations

    async def list_conversations(self, user_id: str | None = None) -> list[Conversation]:
        """Fetch conversations, most recently updated first.

        Transport failures are logged and yield an empty list; the
        selection is cleared with it.

        Raises:
            AuthExpiredError: If ``user_id`` is omitted and nobody is signed in
        """
        try:
            if user_id is None:
                user_id = (await self._require_user()).id
            conversations = reconcile.sort_conversations(
                await self._store.list_conversations(user_id)
            )
        except TransportError as e:
            logger.error("Error loading conversations: %s", e)
            conversations = ()

        self._set_state(reconcile.replace_conversations(self._state, conversations))
        logger.debug("Loaded %d conversation(s)", len(conversations))
        return list(conversations)

    async def select_conversation(self, conversation_id: str) -> list[Message] | None:
        """Show the stored messages of a conversation, oldest first.

        Returns:
            The new message list, or None if nothing changed
        """
        if self._ignored_while_pending("conversation switch"):
            return None

        try:
            messages = await self._store.list_messages(conversation_id)
        except TransportError as e:
            logger.error("Error loading messages for %s: %s", conversation_id, e)
            self._notifier.error("Failed to load messages")
            return None

        if self._ignored_while_pending("conversation switch"):
            return None

        self._set_state(reconcile.select(self._state, conversation_id, messages))
        logger.debug("Selected %s (%d messages)", conversation_id, len(self._state.messages))
        return list(self._state.messages)

    async def _insert_conversation(self, title: str) -> Conversation:
        user = await self._require_user()
        conversation = await self._store.insert_conversation(user.id, title)
        logger.info("Created conversation %s", conversation.id)
        return conversation

    async def create_conversation(
        self, title: str = DEFAULT_CONVERSATION_TITLE
    ) -> Conversation | None:
        """Create an empty conversation, put it first and select it.

        Returns:
            The new conversation, or None if the backend rejected it
        """
        if self._ignored_while_pending("conversation creation"):
            return None

        try:
            conversation = await self._insert_conversation(title)
        except XrozenError as e:
            logger.error("Error creating conversation: %s", e)
            self._notifier.error("Failed to create new conversation")
            if isinstance(e, AuthExpiredError):
                self._auth_expired()
            return None

        state = reconcile.prepend_conversation(self._state, conversation)
        self._set_state(reconcile.select(state, conversation.id, ()))
        return conversation

    async def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a conversation's messages, then the conversation itself.

        Not atomic: if the second step fails the messages are already gone
        and the conversation row remains; deleting again finishes the job.

        Returns:
            True if both deletions went through
        """
        if self._ignored_while_pending("conversation deletion"):
            return False

        try:
            removed = await self._store.delete_messages(conversation_id)
            deleted = await self._store.delete_conversation(conversation_id)
        except TransportError as e:
            logger.error("Error deleting conversation %s: %s", conversation_id, e)
            self._notifier.error("Failed to delete conversation")
            return False

        if not deleted:
            logger.debug("Conversation %s was already gone", conversation_id)
        logger.info("Deleted conversation %s and %d message(s)", conversation_id, removed)

        self._set_state(reconcile.remove_conversation(self._state, conversation_id))
        self._notifier.success("Conversation deleted successfully")
        return True

    async def send_message(self, text: str) -> SendOutcome:
        """Send a message with optimistic display and rollback on failure.

        The user's message is shown immediately under a temporary id. If no
        conversation is selected one is created, titled after the message.
        On success the message keeps its place under a permanent id and the
        reply is appended; on failure it is removed and the reason notified.
        """
        content = text.strip()
        if not content:
            return Rejected(reason="empty")
        if self._state.pending:
            logger.debug("Send rejected: another send is pending")
            return Rejected(reason="pending")

        temp_id = temporary_id()
        optimistic = Message(
            id=temp_id,
            conversation_id=self._state.selected_id,
            role=Role.USER,
            content=content,
            created_at=self._clock(),
        )
        history = self._state.history()
        self._set_state(reconcile.begin_send(self._state, optimistic))

        created: Conversation | None = None
        try:
            conversation_id = self._state.selected_id
            if conversation_id is None:
                created = await self._insert_conversation(content[:TITLE_LENGTH])
                self._set_state(reconcile.prepend_conversation(self._state, created))
                conversation_id = created.id

            response = await self._assistant.invoke(
                AssistantRequest(message=content, conversation_id=conversation_id, messages=history)
            )
        except XrozenError as e:
            logger.error("Error sending message: %s", e)
            outcome = RolledBack(
                temp_id=temp_id,
                reason=str(e) or "Failed to send message",
                auth_expired=isinstance(e, AuthExpiredError),
                created_conversation=created,
            )
            self._set_state(reconcile.apply_outcome(self._state, outcome))
            self._notifier.error(outcome.reason)
            if outcome.auth_expired:
                self._auth_expired()
            return outcome
        except BaseException:
            self._set_state(
                reconcile.rollback(self._state, RolledBack(temp_id=temp_id, reason="interrupted"))
            )
            raise

        extraction = extract_action_payload(response.response)
        now = self._clock()
        outcome = Committed(
            temp_id=temp_id,
            user_message=optimistic.model_copy(
                update={
                    "id": response.user_message_id or str(uuid4()),
                    "conversation_id": conversation_id,
                }
            ),
            assistant_message=Message(
                id=response.assistant_message_id or str(uuid4()),
                conversation_id=conversation_id,
                role=Role.ASSISTANT,
                content=extraction.display_text,
                created_at=now,
            ),
            action_payload=extraction.payload,
            created_conversation=created,
        )
        state = reconcile.apply_outcome(self._state, outcome)
        self._set_state(reconcile.touch_conversation(state, conversation_id, now))
        if extraction.payload is not None:
            logger.info("Reply carried an action payload (%d chars)", len(extraction.payload))
        return outcome
