"""Pytest configuration and shared fixtures."""
import asyncio
import base64
import os
from typing import Any

import pytest

from ownchat.client import RelayError
from ownchat.config import RelayConfig
from ownchat.llm import Attachment, ChatMessage, LLMProvider, LLMResponse
from ownchat.llm.attachments import decode_payload
from ownchat.server.schemas import ChatResponse, TextBlock

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeProvider(LLMProvider):
    """Provider double that records requests and returns a canned reply."""

    def __init__(self, name: str, reply: str = "Hello from the model", error: Exception | None = None):
        self.name = name
        self._reply = reply
        self._error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return f"{self.name}-test"

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        # Decode like the real providers so bad payloads surface the same way
        for msg in messages:
            for attachment in msg.files:
                decode_payload(attachment)
        if self._error is not None:
            raise self._error
        return LLMResponse(
            content=self._reply,
            model=self.model,
            usage={"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        )

    async def close(self) -> None:
        self.closed = True


class FakeRelayClient:
    """Relay client double for conversation and TUI tests."""

    def __init__(
        self,
        reply: str = "Hi there",
        error: Exception | None = None,
        block: bool = False,
    ) -> None:
        self.base_url = "http://relay.test"
        self._reply = reply
        self._error = error
        self._block = block
        self.started = asyncio.Event()
        self.sent: list[tuple[list[str], str]] = []

    async def send(self, messages, model: str) -> ChatResponse:
        self.sent.append(([m.content for m in messages], model))
        self.started.set()
        if self._block:
            await asyncio.Event().wait()
        if self._error is not None:
            raise self._error
        return ChatResponse(content=[TextBlock(text=self._reply)], model=f"{model}-test")


@pytest.fixture
def relay_config():
    """Relay configuration with both providers configured."""
    return RelayConfig(anthropic_api_key="sk-ant-test", gemini_api_key="gemini-test")


@pytest.fixture
def fake_providers():
    return {"claude": FakeProvider("claude"), "gemini": FakeProvider("gemini")}


@pytest.fixture
def fake_client():
    return FakeRelayClient()


@pytest.fixture
def relay_error():
    return RelayError("Could not reach relay", status_code=None)


@pytest.fixture
def png_attachment():
    return Attachment(
        name="chart.png",
        mime_type="image/png",
        size=len(PNG_BYTES),
        data=base64.b64encode(PNG_BYTES).decode("ascii"),
    )


@pytest.fixture
def pdf_attachment():
    raw = b"%PDF-1.4\n%fake\n"
    return Attachment(
        name="report.pdf",
        mime_type="application/pdf",
        size=len(raw),
        data="data:application/pdf;base64," + base64.b64encode(raw).decode("ascii"),
    )


@pytest.fixture
def text_attachment():
    raw = "def add(a, b):\n    return a + b\n".encode("utf-8")
    return Attachment(
        name="math_utils.py",
        mime_type="text/x-python",
        size=len(raw),
        data=base64.b64encode(raw).decode("ascii"),
    )


@pytest.fixture
def binary_attachment():
    raw = b"\x00\x01\x02\x03"
    return Attachment(
        name="blob.bin",
        mime_type="application/octet-stream",
        size=len(raw),
        data=base64.b64encode(raw).decode("ascii"),
    )


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
        "gemini": os.getenv("GEMINI_API_KEY"),
    }
