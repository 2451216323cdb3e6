from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str
    content: str


class ChatRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    utterance: str | None = None
    prior_state: Any = Field(default=None, alias="priorState")
    messages: list[ChatMessageSchema] = Field(default_factory=list)

    def resolved_utterance(self) -> str | None:
        if self.utterance and self.utterance.strip():
            return self.utterance.strip()
        for message in reversed(self.messages):
            if message.role == "user" and message.content.strip():
                return message.content.strip()
        return None

    def history(self) -> list[dict[str, str]]:
        return [{"role": m.role, "content": m.content} for m in self.messages if m.role in ("user", "assistant")]


class ChatResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reply: str
    new_state: dict[str, Any] | None = Field(default=None, alias="newState")
    intent: str
