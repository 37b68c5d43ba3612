from .attachments import AttachmentError, load_attachment
from .base import LLMProvider, ProviderError
from .factory import SUPPORTED_PROVIDERS, create_llm_provider, normalize_provider_name
from .models import Attachment, ChatMessage, LLMResponse
from .providers import AnthropicProvider, GeminiProvider

__all__ = [
    "LLMProvider",
    "ProviderError",
    "create_llm_provider",
    "normalize_provider_name",
    "SUPPORTED_PROVIDERS",
    "Attachment",
    "AttachmentError",
    "ChatMessage",
    "LLMResponse",
    "load_attachment",
    "AnthropicProvider",
    "GeminiProvider",
]
