"""Factory functions for CLI commands.

Centralizes creation of configuration, logging and the relay client from
environment variables. Hides configuration details from command implementations.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from ..client import RelayClient
from ..config import RelayConfig

_console = Console()


def get_config() -> RelayConfig:
    """Read relay configuration from the environment (see RelayConfig.from_env)."""
    return RelayConfig.from_env()


def setup_logging(level: str = "info", console: Console | None = None) -> None:
    """Route stdlib logging (ours, uvicorn's, the SDKs') through Rich.

    Args:
        level: Log level name (debug, info, warning, error)
        console: Optional Rich console for output
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or _console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # SDK request logs are noisy below debug
    if level.lower() != "debug":
        for noisy in ("httpx", "httpcore", "anthropic", "google_genai"):
            logging.getLogger(noisy).setLevel(logging.WARNING)


def warn_missing_keys(config: RelayConfig, console: Console | None = None) -> bool:
    """Print a warning for each provider without an API key.

    Returns:
        True if at least one provider is configured
    """
    con = console or _console
    if not config.anthropic_api_key:
        con.print("[yellow]Warning: ANTHROPIC_API_KEY not set, Claude requests will fail[/yellow]")
    if not config.gemini_api_key:
        con.print("[yellow]Warning: GEMINI_API_KEY not set, Gemini requests will fail[/yellow]")
    return bool(config.configured_providers())


def get_relay_client(config: RelayConfig, relay_url: str | None = None) -> RelayClient:
    """Create a relay client.

    Args:
        config: Relay configuration
        relay_url: Override for OWNCHAT_RELAY_URL
    """
    return RelayClient(relay_url or config.relay_url, timeout=config.request_timeout)
