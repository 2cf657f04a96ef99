"""Hosted backend collaborators: identity and conversation/message tables."""

from .base import ConversationStore, IdentityProvider, StaticIdentityProvider
from .factory import create_conversation_store, create_identity_provider
from .http import HostedClient
from .models import Conversation, Message, Role, User

__all__ = [
    "Conversation",
    "ConversationStore",
    "HostedClient",
    "IdentityProvider",
    "Message",
    "Role",
    "StaticIdentityProvider",
    "User",
    "create_conversation_store",
    "create_identity_provider",
]
