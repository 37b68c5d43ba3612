"""Gemini provider built on the google-genai SDK.

Attachments travel as inline-data parts next to the message text, and the
relay's system prompt becomes the request's system_instruction.

Gemini occasionally answers with no candidates or an empty part list, so
requests are retried a few times before giving up.
"""

import asyncio
from typing import Any

from google import genai
from google.genai import types

from ..attachments import classify, decode_payload, format_text_file, unsupported_note
from ..base import LLMProvider, ProviderError
from ..models import Attachment, ChatMessage, LLMResponse

# Only block high-probability harm; code and chat content trips lower thresholds
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category=category, threshold="BLOCK_ONLY_HIGH")
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

INLINE_KINDS = ("image", "document", "media")


class GeminiProvider(LLMProvider):
    """Relays conversations to Google Gemini.

    Hidden design decisions:
    - Assistant turns use Gemini's "model" role
    - Images, PDFs and audio/video become inline-data parts
    - Empty replies are retried with a linear backoff
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        max_retries: int = 3,
        retry_delay: float = 0.5,
        **client_kwargs: Any
    ):
        """
        Args:
            api_key: Gemini API key
            model: Model id used when a request does not name one
            max_retries: Attempts before an empty reply is treated as an error
            retry_delay: Seconds to wait after the first empty reply; grows linearly
            **client_kwargs: Passed through to genai.Client
        """
        self._model = model
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    @staticmethod
    def _file_part(attachment: Attachment) -> types.Part:
        kind = classify(attachment)
        if kind in INLINE_KINDS:
            return types.Part.from_bytes(
                data=decode_payload(attachment),
                mime_type=attachment.mime_type,
            )
        if kind == "text":
            return types.Part(text=format_text_file(attachment))
        return types.Part(text=unsupported_note(attachment))

    def _convert_messages(self, messages: list[ChatMessage]) -> tuple[str | None, list[types.Content]]:
        """Split out system text and build one Content per remaining message.

        Returns:
            (system_instruction or None, contents)
        """
        system_texts = [m.content for m in messages if m.role == "system"]
        contents: list[types.Content] = []

        for msg in messages:
            if msg.role == "system":
                continue
            parts = [self._file_part(f) for f in msg.files]
            # Gemini rejects a Content without parts
            if msg.content.strip() or not parts:
                parts.append(types.Part(text=msg.content))
            role = "model" if msg.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=parts))

        return ("\n\n".join(system_texts) or None), contents

    @staticmethod
    def _response_text(response) -> str:
        candidates = response.candidates or []
        if candidates and candidates[0].content and candidates[0].content.parts:
            text = "".join(
                part.text for part in candidates[0].content.parts if getattr(part, "text", None)
            )
            if text:
                return text
        try:
            return response.text or ""
        except (ValueError, AttributeError):
            return ""

    @staticmethod
    def _usage(response) -> dict[str, int] | None:
        meta = response.usage_metadata
        if not meta:
            return None
        return {
            "prompt_tokens": meta.prompt_token_count or 0,
            "completion_tokens": meta.candidates_token_count or 0,
            "total_tokens": meta.total_token_count or 0,
        }

    def _build_config(
        self,
        system_instruction: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> types.GenerateContentConfig:
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
            safety_settings=DEFAULT_SAFETY_SETTINGS,
            # No tools are declared; NONE stops UNEXPECTED_TOOL_CALL finishes
            tool_config=types.ToolConfig(
                function_calling_config=types.FunctionCallingConfig(mode="NONE")
            ),
            **kwargs
        )
        if max_tokens is not None:
            config.max_output_tokens = max_tokens
        return config

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send the conversation to Gemini and return the reply text.

        Raises:
            AttachmentError: If an attachment payload cannot be decoded
            ProviderError: If all attempts returned no text
        """
        model_id = model or self._model
        system_instruction, contents = self._convert_messages(messages)
        config = self._build_config(system_instruction, temperature, max_tokens, **kwargs)

        usage = None
        for attempt in range(1, self._max_retries + 1):
            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=contents,
                config=config,
            )
            usage = self._usage(response) or usage
            text = self._response_text(response)
            if text:
                return LLMResponse(content=text, model=model_id, usage=usage)
            if attempt < self._max_retries:
                await asyncio.sleep(self._retry_delay * attempt)

        raise ProviderError(
            f"Gemini returned an empty response after {self._max_retries} attempt(s)"
        )

    async def close(self) -> None:
        """Nothing to release; genai.Client holds no open connections."""
