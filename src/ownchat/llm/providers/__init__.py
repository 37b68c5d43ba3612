from .anthropic import AnthropicProvider
from .gemini import GeminiProvider

__all__ = ["AnthropicProvider", "GeminiProvider"]
