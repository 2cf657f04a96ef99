from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """One prompt message in the provider's chat format."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole = Field(description="Prompt role: system instructions, user or assistant turn")
    content: str

    def to_wire(self) -> dict[str, str]:
        """Chat Completions message dict."""
        return {"role": self.role, "content": self.content}


class LLMResponse(BaseModel):
    """Text produced for one assistant turn."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Reply text, possibly carrying action blocks")
    model: str = Field(description="Model that produced the reply")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Prompt/completion/total token counts, when reported"
    )
