"""HTTP client for the relay server.

Hides the wire format of POST /api/chat from the chat UI.
"""

from collections.abc import Sequence
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..llm.models import Attachment
from ..server.schemas import ChatResponse


class RelayError(Exception):
    """Raised when the relay cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class OutgoingMessage(Protocol):
    role: str
    content: str
    files: list[Attachment]


def build_payload(messages: Sequence[OutgoingMessage], model: str) -> dict[str, Any]:
    """Build the JSON body for POST /api/chat.

    Timestamps stay on the client; only role, content and files travel.
    """
    wire_messages = []
    for msg in messages:
        item: dict[str, Any] = {"role": msg.role, "content": msg.content}
        if msg.files:
            item["files"] = [f.model_dump() for f in msg.files]
        wire_messages.append(item)
    return {"messages": wire_messages, "model": model}


class RelayClient:
    """Async client that posts conversations to the relay.

    Cancelling the awaiting task cancels the in-flight HTTP request.

    Example:
        async with RelayClient("http://127.0.0.1:8000") as client:
            reply = await client.send(messages, "claude")
            print(reply.text)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def send(self, messages: Sequence[OutgoingMessage], model: str) -> ChatResponse:
        """Send the conversation and return the assistant's reply.

        Args:
            messages: Conversation history, oldest first
            model: Provider name ('claude' or 'gemini')

        Returns:
            Normalized relay response

        Raises:
            RelayError: On network failure, non-2xx status, or malformed body
        """
        try:
            response = await self._client.post("/api/chat", json=build_payload(messages, model))
        except httpx.HTTPError as e:
            raise RelayError(f"Could not reach relay at {self._base_url}: {e}") from e

        if response.status_code != 200:
            raise RelayError(
                f"Relay returned {response.status_code}: {self._error_text(response)}",
                status_code=response.status_code,
            )

        try:
            reply = ChatResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RelayError(f"Relay returned a malformed response: {e}") from e

        if not reply.content:
            raise RelayError("Relay returned an empty reply")
        return reply

    async def health(self) -> dict[str, Any]:
        """Fetch the relay's health document."""
        try:
            response = await self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RelayError(f"Relay health check failed: {e}") from e
        return response.json()

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and "error" in body:
            return str(body["error"])
        return response.text

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RelayClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
