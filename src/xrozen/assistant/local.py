"""Assistant function running in-process on top of an LLM provider.

Stands in for the hosted edge function when working against a local
store: it answers with an LLM and persists the turn exactly like the
hosted function does, so the client's message list matches the tables
once the send commits.
"""

import logging

from ..backend.base import ConversationStore
from ..backend.models import Role
from ..errors import TransportError
from ..llm import ChatMessage, LLMProvider
from .base import AssistantFunction
from .models import AssistantRequest, AssistantResponse
from .prompts import SYSTEM_PROMPT
from ..session.actions import extract_action_payload

logger = logging.getLogger(__name__)


class LLMAssistantFunction(AssistantFunction):
    """Answers with an LLM and records both messages in the store."""

    def __init__(
        self,
        llm: LLMProvider,
        store: ConversationStore,
        system_prompt: str = SYSTEM_PROMPT,
        temperature: float = 0.7,
        max_history: int | None = 20,
    ):
        self._llm = llm
        self._store = store
        self._system_prompt = system_prompt
        self._temperature = temperature
        self._max_history = max_history

    def _build_messages(self, request: AssistantRequest) -> list[ChatMessage]:
        history = request.messages
        if self._max_history is not None:
            history = history[-self._max_history:] if self._max_history else []
        return [
            ChatMessage(role="system", content=self._system_prompt),
            *(ChatMessage(role=entry.role.value, content=entry.content) for entry in history),
            ChatMessage(role="user", content=request.message),
        ]

    async def invoke(self, request: AssistantRequest) -> AssistantResponse:
        conversation = await self._store.get_conversation(request.conversation_id)
        if conversation is None:
            raise TransportError(f"Conversation {request.conversation_id} not found", status_code=404)

        reply = await self._llm.chat_completion(
            self._build_messages(request), temperature=self._temperature
        )
        logger.debug("LLM replied with %d chars (usage=%s)", len(reply.content), reply.usage)

        # Stored without the action block, as the client displays it.
        display_text = extract_action_payload(reply.content).display_text
        user_message = await self._store.insert_message(conversation.id, Role.USER, request.message)
        assistant_message = await self._store.insert_message(
            conversation.id, Role.ASSISTANT, display_text
        )
        await self._store.touch_conversation(conversation.id)

        return AssistantResponse(
            response=reply.content,
            user_message_id=user_message.id,
            assistant_message_id=assistant_message.id,
        )

    async def close(self) -> None:
        await self._llm.close()
