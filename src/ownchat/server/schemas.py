"""Wire schemas for the relay's HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..llm.factory import normalize_provider_name
from ..llm.models import ChatMessage


class ChatRequest(BaseModel):
    """Body of POST /api/chat."""

    messages: list[ChatMessage] = Field(
        min_length=1,
        description="Conversation history, oldest first"
    )
    model: str = Field(default="claude", description="Provider to relay to: 'claude' or 'gemini'")

    @field_validator("messages")
    @classmethod
    def _check_messages(cls, messages: list[ChatMessage]) -> list[ChatMessage]:
        for index, msg in enumerate(messages):
            if msg.role == "system":
                raise ValueError("system messages are set by the relay, not the client")
            if not msg.content.strip() and not msg.files:
                raise ValueError(f"message {index} has no content or files")
        return messages

    @field_validator("model")
    @classmethod
    def _known_model(cls, value: str) -> str:
        return normalize_provider_name(value)


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ChatResponse(BaseModel):
    """Normalized reply returned for every provider."""

    content: list[TextBlock]
    model: str
    usage: dict[str, int] | None = None

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    providers: list[str]
