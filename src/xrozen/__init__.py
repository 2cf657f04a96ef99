"""
Xrozen: chat session client for the XrozenAI assistant.

Keeps a user's conversation list and the open conversation in sync with
the backend, sends messages optimistically and reconciles them with the
assistant's reply. Each collaborator (identity, storage, assistant,
notifications) hides its implementation behind an abstract interface.
"""

__version__ = "0.1.0"

from .errors import AuthExpiredError, ConfigurationError, TransportError, XrozenError
from .session import ConversationSessionManager, SessionState

__all__ = [
    "AuthExpiredError",
    "ConfigurationError",
    "ConversationSessionManager",
    "SessionState",
    "TransportError",
    "XrozenError",
]
