"""
OwnChat: a chat client and relay server for Anthropic Claude and Google Gemini.

The relay accepts a conversation over HTTP, translates it (including inline
files and images) into the selected provider's request format, and returns a
normalized reply.
"""

__version__ = "0.1.0"

from .config import RelayConfig
from .llm import Attachment, ChatMessage, LLMResponse, create_llm_provider

__all__ = [
    "Attachment",
    "ChatMessage",
    "LLMResponse",
    "RelayConfig",
    "create_llm_provider",
]
