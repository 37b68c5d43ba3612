"""Provider construction by name.

Callers name a provider ("claude" or "gemini", or an alias) and never import
the SDK-backed classes directly.
"""

from typing import Any

from .base import LLMProvider
from .providers import AnthropicProvider, GeminiProvider

SUPPORTED_PROVIDERS = ("claude", "gemini")

_ALIASES = {
    "claude": "claude",
    "anthropic": "claude",
    "gemini": "gemini",
    "google": "gemini",
}

_PROVIDER_CLASSES: dict[str, tuple[type[LLMProvider], str]] = {
    "claude": (AnthropicProvider, "Anthropic"),
    "gemini": (GeminiProvider, "Gemini"),
}


def normalize_provider_name(provider: str) -> str:
    """Map provider aliases to the names used on the wire.

    Raises:
        ValueError: If provider is not supported
    """
    name = _ALIASES.get(provider.strip().lower())
    if name is None:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(repr(p) for p in SUPPORTED_PROVIDERS)}"
        )
    return name


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Build the provider registered under a name or alias.

    Args:
        provider: 'claude' (alias 'anthropic') or 'gemini' (alias 'google')
        **config: Constructor arguments; 'api_key' is always required.
            Claude also takes model, base_url and max_tokens; Gemini takes
            model, max_retries and retry_delay.

    Raises:
        ValueError: If provider type is not supported
        TypeError: If api_key is missing

    Example:
        >>> provider = create_llm_provider("gemini", api_key="...", model="gemini-2.5-pro")
    """
    cls, label = _PROVIDER_CLASSES[normalize_provider_name(provider)]
    if "api_key" not in config:
        raise TypeError(f"{label} provider requires 'api_key' in config")
    return cls(**config)
