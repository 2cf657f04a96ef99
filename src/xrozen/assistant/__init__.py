"""Assistant function clients."""

from .base import AssistantFunction, UnavailableAssistantFunction
from .factory import create_assistant_function
from .models import AssistantRequest, AssistantResponse, HistoryEntry

__all__ = [
    "AssistantFunction",
    "AssistantRequest",
    "AssistantResponse",
    "HistoryEntry",
    "UnavailableAssistantFunction",
    "create_assistant_function",
]
