"""Provider interface shared by the Claude and Gemini relays."""

from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse


class ProviderError(RuntimeError):
    """Raised when a provider returns output that cannot be relayed."""


class LLMProvider(ABC):
    """One upstream chat API behind a common call.

    The relay only sees ChatMessage in and LLMResponse out. Each subclass
    owns its SDK client, its wire format for text and attachments, and how
    it reads text and token usage back out of a reply.

    Providers hold network clients, so prefer:
        async with create_llm_provider("claude", api_key=key) as provider:
            reply = await provider.chat_completion(history)
    """

    name: str = "provider"

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model used when a request does not name one."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a conversation upstream and return the assistant's reply.

        Args:
            messages: Oldest first; system messages may appear anywhere
            model: Overrides the provider's default model id
            temperature: Sampling temperature
            max_tokens: Completion budget, None for the provider default
            **kwargs: Passed to the SDK request unchanged

        Raises:
            ProviderError: If the provider produced no usable content
            AttachmentError: If an attached file cannot be decoded
            Exception: SDK errors are propagated unchanged
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying SDK client."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx can fail to close once the loop is gone (encode/httpx#914)
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
