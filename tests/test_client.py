"""Tests for the relay HTTP client."""
import json

import httpx
import pytest

from ownchat.client import RelayClient, RelayError, build_payload
from ownchat.ui.models import ChatMessage


def _client(handler) -> RelayClient:
    return RelayClient("http://relay.test/", transport=httpx.MockTransport(handler))


class TestBuildPayload:
    """Tests for request body construction."""

    def test_text_only_messages(self):
        """Test that text messages carry only role and content."""
        payload = build_payload(
            [ChatMessage(role="user", content="Hi"), ChatMessage(role="assistant", content="Hello")],
            "gemini",
        )

        assert payload == {
            "messages": [
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello"},
            ],
            "model": "gemini",
        }

    def test_files_serialized(self, png_attachment):
        """Test that attachments are sent with name, type, size and data."""
        payload = build_payload(
            [ChatMessage(role="user", content="Look", files=[png_attachment])],
            "claude",
        )

        files = payload["messages"][0]["files"]
        assert files == [{
            "name": "chart.png",
            "mime_type": "image/png",
            "size": png_attachment.size,
            "data": png_attachment.data,
        }]

    def test_timestamp_not_sent(self):
        """Test that local timestamps stay out of the request."""
        payload = build_payload([ChatMessage(role="user", content="Hi")], "claude")
        assert "timestamp" not in payload["messages"][0]


class TestRelayClient:
    """Tests for RelayClient against a mock transport."""

    @pytest.mark.asyncio
    async def test_send_success(self):
        """Test that a 200 reply is posted to /api/chat and parsed."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "content": [{"type": "text", "text": "4"}],
                "model": "claude-sonnet-4-20250514",
                "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
            })

        async with _client(handler) as client:
            reply = await client.send([ChatMessage(role="user", content="2+2?")], "claude")

        assert seen["path"] == "/api/chat"
        assert seen["body"]["model"] == "claude"
        assert reply.text == "4"
        assert reply.usage["total_tokens"] == 4

    @pytest.mark.asyncio
    async def test_server_error_maps_to_relay_error(self):
        """Test that a relay error body becomes a RelayError with its status."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "upstream exploded"})

        async with _client(handler) as client:
            with pytest.raises(RelayError, match="upstream exploded") as exc_info:
                await client.send([ChatMessage(role="user", content="Hi")], "claude")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test that an unreachable relay raises RelayError without a status."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(RelayError, match="Could not reach relay") as exc_info:
                await client.send([ChatMessage(role="user", content="Hi")], "claude")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        """Test that a reply without content blocks is rejected."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"unexpected": True})

        async with _client(handler) as client:
            with pytest.raises(RelayError, match="malformed"):
                await client.send([ChatMessage(role="user", content="Hi")], "claude")

    @pytest.mark.asyncio
    async def test_empty_content(self):
        """Test that a reply with no text is rejected."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"content": [], "model": "gemini-2.5-flash"})

        async with _client(handler) as client:
            with pytest.raises(RelayError, match="empty reply"):
                await client.send([ChatMessage(role="user", content="Hi")], "gemini")

    @pytest.mark.asyncio
    async def test_health(self):
        """Test that health returns the relay status body."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/health"
            return httpx.Response(200, json={"status": "ok", "providers": ["claude"]})

        async with _client(handler) as client:
            status = await client.health()

        assert status == {"status": "ok", "providers": ["claude"]}

    def test_base_url_trailing_slash_stripped(self):
        """Test that the base URL is stored without a trailing slash."""
        client = RelayClient("http://relay.test/")
        assert client.base_url == "http://relay.test"
