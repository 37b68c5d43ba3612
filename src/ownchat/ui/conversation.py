"""Conversation state for the chat client.

Hides how the message list changes on send, edit-and-resend, cancel and
clear. Holds no widgets, so the same rules apply to any front end.
"""

import asyncio
from typing import Protocol

from ..client import RelayError
from ..llm.factory import normalize_provider_name
from ..llm.models import Attachment
from ..server.schemas import ChatResponse
from .config import CANCELLED_MESSAGE, ERROR_MESSAGE_TEMPLATE, MODELS
from .models import ChatMessage


class ChatClient(Protocol):
    """What the conversation needs from a relay client."""

    @property
    def base_url(self) -> str: ...

    async def send(self, messages: list[ChatMessage], model: str) -> ChatResponse: ...


class Conversation:
    """Ordered in-memory chat history with a single in-flight request.

    Usage:
        conversation = Conversation(model="claude")
        if conversation.submit("Hello"):
            await conversation.request_reply(client)
    """

    def __init__(self, model: str = "claude") -> None:
        self.messages: list[ChatMessage] = []
        self.model = normalize_provider_name(model)
        self.is_loading = False
        self.last_error: str | None = None
        self.last_usage: dict[str, int] | None = None
        self._generation = 0

    def __len__(self) -> int:
        return len(self.messages)

    def submit(self, text: str, files: list[Attachment] | None = None) -> bool:
        """Append a user message and mark a request as pending.

        Returns:
            False if the input is blank (and has no files) or a request is
            already in flight; nothing is appended in that case.
        """
        files = list(files or [])
        if self.is_loading or (not text.strip() and not files):
            return False
        self.messages.append(ChatMessage(role="user", content=text, files=files))
        self.is_loading = True
        return True

    def edit(self, index: int, content: str) -> bool:
        """Replace the user message at index and drop everything after it.

        The edited message keeps its attachments and gets a new timestamp.

        Returns:
            False if content is blank or a request is in flight.

        Raises:
            IndexError: If index is out of range
            ValueError: If the message at index is not a user message
        """
        if not 0 <= index < len(self.messages):
            raise IndexError(f"No message at index {index}")
        original = self.messages[index]
        if original.role != "user":
            raise ValueError("Only user messages can be edited")
        if self.is_loading or not content.strip():
            return False

        self.messages = self.messages[:index]
        self.messages.append(ChatMessage(role="user", content=content, files=list(original.files)))
        self.is_loading = True
        return True

    def outgoing(self) -> list[ChatMessage]:
        """Messages to send to the relay; local error/cancel notices are skipped."""
        return [msg for msg in self.messages if not msg.is_notice]

    async def request_reply(self, client: ChatClient) -> ChatMessage:
        """Send the pending conversation and append the assistant's reply.

        Relay failures append the generic error notice instead of raising.
        Cancellation appends the cancellation notice and re-raises.
        If the chat was cleared while waiting, the reply is discarded.

        Returns:
            The message appended to the conversation
        """
        generation = self._generation
        self.last_error = None
        try:
            reply = await client.send(self.outgoing(), self.model)
        except asyncio.CancelledError:
            self.mark_cancelled()
            raise
        except RelayError as e:
            self.last_error = str(e)
            notice = ChatMessage(
                role="assistant",
                content=ERROR_MESSAGE_TEMPLATE.format(url=client.base_url),
                is_notice=True,
            )
            if generation == self._generation:
                self.messages.append(notice)
            return notice
        finally:
            self.is_loading = False

        message = ChatMessage(role="assistant", content=reply.text)
        if generation == self._generation:
            self.messages.append(message)
            self.last_usage = reply.usage
        return message

    def mark_cancelled(self) -> bool:
        """Record a cancellation if a request is pending. Returns True if recorded."""
        if not self.is_loading:
            return False
        self.is_loading = False
        self._append_notice(CANCELLED_MESSAGE)
        return True

    def fail(self, error: str, relay_url: str) -> ChatMessage:
        """Record an unexpected failure of the pending request."""
        self.is_loading = False
        self.last_error = error
        return self._append_notice(ERROR_MESSAGE_TEMPLATE.format(url=relay_url))

    def clear(self) -> None:
        """Drop all messages. A reply still in flight will be discarded."""
        self.messages = []
        self.is_loading = False
        self.last_error = None
        self.last_usage = None
        self._generation += 1

    def set_model(self, model: str) -> None:
        self.model = normalize_provider_name(model)

    def toggle_model(self) -> str:
        """Switch to the next provider and return its name."""
        index = MODELS.index(self.model)
        self.model = MODELS[(index + 1) % len(MODELS)]
        return self.model

    def last_response(self) -> str | None:
        """Get the last assistant reply, ignoring notices."""
        for msg in reversed(self.messages):
            if msg.role == "assistant" and not msg.is_notice:
                return msg.content
        return None

    def last_user_index(self) -> int | None:
        for index in range(len(self.messages) - 1, -1, -1):
            if self.messages[index].role == "user":
                return index
        return None

    def _append_notice(self, text: str) -> ChatMessage:
        message = ChatMessage(role="assistant", content=text, is_notice=True)
        self.messages.append(message)
        return message
