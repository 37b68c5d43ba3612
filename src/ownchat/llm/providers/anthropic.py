"""Claude provider built on the anthropic SDK (Messages API).

Images and PDFs become base64 content blocks; text files are inlined as
fenced text blocks. The system prompt goes in the top-level system field.
"""

import base64
from typing import Any

from anthropic import AsyncAnthropic

from ..attachments import classify, decode_payload, format_text_file, unsupported_note
from ..base import LLMProvider, ProviderError
from ..models import Attachment, ChatMessage, LLMResponse

DEFAULT_MAX_TOKENS = 20000


class AnthropicProvider(LLMProvider):
    """Relays conversations to Anthropic Claude.

    Hidden design decisions:
    - Which attachment kinds map to image, document or text blocks
    - Anthropic needs an explicit max_tokens on every request
    """

    name = "claude"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        **client_kwargs: Any
    ):
        """
        Args:
            api_key: Anthropic API key
            model: Model id used when a request does not name one
            base_url: Alternate API endpoint (proxies, gateways)
            max_tokens: Completion budget when a request does not set one
            **client_kwargs: Passed through to AsyncAnthropic
        """
        self._model = model
        self._max_tokens = max_tokens
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    @staticmethod
    def _file_block(attachment: Attachment) -> dict[str, Any]:
        """Convert one attachment into an Anthropic content block."""
        kind = classify(attachment)
        if kind in ("image", "document"):
            payload = base64.b64encode(decode_payload(attachment)).decode("ascii")
            return {
                "type": kind,
                "source": {
                    "type": "base64",
                    "media_type": attachment.mime_type,
                    "data": payload,
                },
            }
        if kind == "text":
            return {"type": "text", "text": format_text_file(attachment)}
        return {"type": "text", "text": unsupported_note(attachment)}

    def _convert_messages(
        self, messages: list[ChatMessage]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Split out the system prompt and convert messages to Anthropic format.

        User messages with attachments become a list of content blocks with
        the files first and the typed text last.
        """
        system_parts: list[str] = []
        anthropic_messages: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
                continue

            if msg.role == "user" and msg.files:
                blocks = [self._file_block(f) for f in msg.files]
                if msg.content.strip():
                    blocks.append({"type": "text", "text": msg.content})
                anthropic_messages.append({"role": "user", "content": blocks})
            else:
                anthropic_messages.append({"role": msg.role, "content": msg.content})

        system_message = "\n\n".join(system_parts) if system_parts else None
        return system_message, anthropic_messages

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send the conversation to Claude and return the concatenated text blocks.

        Raises:
            AttachmentError: If an attachment payload cannot be decoded
            ProviderError: If the reply holds no text (e.g. only tool_use blocks)
        """
        system_message, anthropic_messages = self._convert_messages(messages)

        params: dict[str, Any] = {
            "model": model or self._model,
            "messages": anthropic_messages,
            "temperature": temperature,
            "max_tokens": max_tokens or self._max_tokens,
            **kwargs
        }
        if system_message:
            params["system"] = system_message

        response = await self._client.messages.create(**params)

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens
            }

        # Only text blocks are relayed
        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not content:
            raise ProviderError(
                f"Claude returned no text content (stop reason: {response.stop_reason})"
            )

        return LLMResponse(
            content=content,
            model=response.model,
            usage=usage
        )

    async def close(self) -> None:
        await self._client.close()
