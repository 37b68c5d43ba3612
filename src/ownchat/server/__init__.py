"""HTTP relay between chat clients and the LLM providers."""

from .app import create_app
from .registry import ProviderNotConfiguredError, ProviderRegistry
from .schemas import ChatRequest, ChatResponse, TextBlock

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ProviderNotConfiguredError",
    "ProviderRegistry",
    "TextBlock",
    "create_app",
]
