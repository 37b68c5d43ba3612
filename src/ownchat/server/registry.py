"""Provider registry for the relay.

Hides when provider clients are created: each one is built on first use from
the relay configuration and reused for the lifetime of the app.
"""

import logging

from ..config import RelayConfig
from ..llm import LLMProvider, create_llm_provider

logger = logging.getLogger(__name__)


class ProviderNotConfiguredError(RuntimeError):
    """Raised when a request names a provider without an API key."""


class ProviderRegistry:
    """Lazily creates and caches one LLMProvider per provider name."""

    def __init__(
        self,
        config: RelayConfig,
        providers: dict[str, LLMProvider] | None = None,
    ) -> None:
        self._config = config
        self._providers: dict[str, LLMProvider] = dict(providers or {})

    def available(self) -> list[str]:
        """Names of providers that can serve requests."""
        names = set(self._providers) | set(self._config.configured_providers())
        return sorted(names)

    def get(self, name: str) -> LLMProvider:
        """Return the provider for name, creating it if needed.

        Raises:
            ProviderNotConfiguredError: If no API key is set for the provider
        """
        provider = self._providers.get(name)
        if provider is not None:
            return provider

        api_key = self._config.api_key_for(name)
        if not api_key:
            env_var = "ANTHROPIC_API_KEY" if name == "claude" else "GEMINI_API_KEY"
            raise ProviderNotConfiguredError(
                f"Provider '{name}' is not configured: set {env_var}"
            )

        if name == "claude":
            provider = create_llm_provider(
                name,
                api_key=api_key,
                model=self._config.anthropic_model,
                max_tokens=self._config.max_tokens,
            )
        else:
            provider = create_llm_provider(
                name,
                api_key=api_key,
                model=self._config.gemini_model,
            )
        logger.info("Created %s provider (model: %s)", name, provider.model)
        self._providers[name] = provider
        return provider

    async def close(self) -> None:
        """Close every provider that was created."""
        for name, provider in self._providers.items():
            try:
                await provider.close()
            except Exception:
                logger.exception("Failed to close %s provider", name)
        self._providers.clear()
