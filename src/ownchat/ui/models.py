"""Data models for the TUI.

Hides the internal representation of chat messages.
"""

from dataclasses import dataclass, field
from datetime import datetime

from ..llm.models import Attachment


@dataclass
class ChatMessage:
    """A chat message in the conversation."""

    role: str  # "user" or "assistant"
    content: str
    files: list[Attachment] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    is_notice: bool = False  # local error/cancel notice, not a model reply
