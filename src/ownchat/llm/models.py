from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["user", "assistant", "system"]


class Attachment(BaseModel):
    """A file attached to a chat message, carried inline as base64."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Original file name")
    mime_type: str = Field(
        default="application/octet-stream",
        description="MIME type of the file, e.g. 'image/png'"
    )
    size: int = Field(default=0, ge=0, description="Decoded size in bytes")
    data: str = Field(description="Base64 payload, optionally as a data: URL")

    @field_validator("mime_type")
    @classmethod
    def _normalize_mime(cls, value: str) -> str:
        return value.strip().lower() or "application/octet-stream"


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(default="", description="Content of the message")
    files: list[Attachment] = Field(
        default_factory=list,
        description="Files attached to the message"
    )


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
