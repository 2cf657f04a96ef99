"""Request and response shapes of the assistant function.

Field names follow the function's JSON contract (camelCase on the wire),
exposed in snake_case on the Python side.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..backend.models import Role


class HistoryEntry(BaseModel):
    """Role/content pair sent to the assistant as conversation context."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class AssistantRequest(BaseModel):
    """Body of one assistant call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str = Field(description="The user's new message")
    conversation_id: str = Field(alias="conversationId")
    messages: list[HistoryEntry] = Field(
        default_factory=list, description="Prior messages of the conversation, oldest first"
    )

    def to_payload(self) -> dict:
        """JSON body in the function's wire format."""
        return self.model_dump(mode="json", by_alias=True)


class AssistantResponse(BaseModel):
    """Reply of one assistant call.

    ``response`` may embed marker-delimited action blocks. The id fields are
    optional: functions that persist the turn themselves report the ids they
    stored so the client can keep its list identical to the tables.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    response: str
    user_message_id: str | None = Field(default=None, alias="userMessageId")
    assistant_message_id: str | None = Field(default=None, alias="assistantMessageId")
