"""Runtime configuration.

Centralizes environment lookups so the server, client and CLI read the same
variables with the same defaults.
"""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class RelayConfig(BaseModel):
    """Settings shared by the relay server and its clients."""

    model_config = ConfigDict(frozen=True)

    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_CLAUDE_MODEL
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    relay_url: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=20000, ge=1)
    request_timeout: float = Field(default=300.0, gt=0)
    max_attachment_bytes: int = Field(default=20 * 1024 * 1024, ge=1)

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Build configuration from environment variables.

        Environment variables:
            ANTHROPIC_API_KEY: Anthropic API key (enables the claude provider)
            ANTHROPIC_MODEL: Claude model (default: claude-sonnet-4-20250514)
            GEMINI_API_KEY: Gemini API key (enables the gemini provider)
            GEMINI_MODEL: Gemini model (default: gemini-2.5-flash)
            OWNCHAT_HOST: Relay bind host (default: 127.0.0.1)
            OWNCHAT_PORT: Relay bind port (default: 8000)
            OWNCHAT_RELAY_URL: URL the chat client posts to (default: http://host:port)
            OWNCHAT_CORS_ORIGINS: Comma-separated allowed origins (default: *)
            OWNCHAT_TEMPERATURE: Sampling temperature (default: 0.7)
            OWNCHAT_MAX_TOKENS: Completion token budget (default: 20000)
            OWNCHAT_TIMEOUT: Client request timeout in seconds (default: 300)
            OWNCHAT_MAX_ATTACHMENT_MB: Largest attachable file in MB (default: 20)
        """
        host = os.getenv("OWNCHAT_HOST", DEFAULT_HOST)
        port = int(os.getenv("OWNCHAT_PORT", str(DEFAULT_PORT)))
        max_mb = float(os.getenv("OWNCHAT_MAX_ATTACHMENT_MB", "20"))

        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL", DEFAULT_CLAUDE_MODEL),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            host=host,
            port=port,
            relay_url=os.getenv("OWNCHAT_RELAY_URL", f"http://{host}:{port}"),
            cors_origins=_split_csv(os.getenv("OWNCHAT_CORS_ORIGINS", "*")),
            temperature=float(os.getenv("OWNCHAT_TEMPERATURE", "0.7")),
            max_tokens=int(os.getenv("OWNCHAT_MAX_TOKENS", "20000")),
            request_timeout=float(os.getenv("OWNCHAT_TIMEOUT", "300")),
            max_attachment_bytes=int(max_mb * 1024 * 1024),
        )

    def api_key_for(self, provider: str) -> str | None:
        """Return the API key configured for a provider name."""
        if provider == "claude":
            return self.anthropic_api_key
        if provider == "gemini":
            return self.gemini_api_key
        return None

    def configured_providers(self) -> list[str]:
        return [name for name in ("claude", "gemini") if self.api_key_for(name)]
