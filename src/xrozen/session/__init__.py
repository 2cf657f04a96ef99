"""Conversation session: state, reconciliation and the session manager."""

from .actions import ACTION_MARKER, ActionExtraction, decode_action_payload, extract_action_payload
from .manager import DEFAULT_CONVERSATION_TITLE, ConversationSessionManager
from .models import Committed, Rejected, RolledBack, SendOutcome, SessionState
from .notifications import CollectingNotifier, Notification, Notifier, NullNotifier

__all__ = [
    "ACTION_MARKER",
    "ActionExtraction",
    "CollectingNotifier",
    "Committed",
    "ConversationSessionManager",
    "DEFAULT_CONVERSATION_TITLE",
    "Notification",
    "Notifier",
    "NullNotifier",
    "Rejected",
    "RolledBack",
    "SendOutcome",
    "SessionState",
    "decode_action_payload",
    "extract_action_payload",
]
