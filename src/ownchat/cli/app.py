"""Main CLI application using Typer."""
import asyncio
from enum import Enum
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from ..client import RelayError
from ..llm import AttachmentError, load_attachment
from ..ui.models import ChatMessage
from .providers import get_config, get_relay_client, setup_logging, warn_missing_keys

load_dotenv()

app = typer.Typer(
    name="ownchat",
    help="Chat with Claude or Gemini through a local relay server",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


class Provider(str, Enum):
    CLAUDE = "claude"
    GEMINI = "gemini"


class LogLevelName(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind host (default: OWNCHAT_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: OWNCHAT_PORT)"),
    log_level: LogLevelName = typer.Option(
        LogLevelName.INFO,
        "--log-level",
        "-l",
        help="Log level for relay output"
    ),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development)"),
):
    """Run the relay server that forwards chats to Claude or Gemini."""
    config = get_config()
    setup_logging(log_level.value, console)

    if not warn_missing_keys(config, console):
        console.print("[red]Error: no provider configured; set ANTHROPIC_API_KEY or GEMINI_API_KEY[/red]")
        raise typer.Exit(code=1)

    bind_host = host or config.host
    bind_port = port or config.port
    console.print(f"[green]Relay listening on http://{bind_host}:{bind_port}/api/chat[/green]")

    uvicorn.run(
        "ownchat.server.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,
        log_level=log_level.value,
    )


@app.command()
def chat(
    model: Provider = typer.Option(Provider.CLAUDE, "--model", "-m", help="Initial provider"),
    relay_url: str | None = typer.Option(
        None,
        "--relay-url",
        "-r",
        help="Relay base URL (default: OWNCHAT_RELAY_URL)"
    ),
    log_level: LogLevelName | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level"
    ),
):
    """Open the interactive chat TUI."""
    from ..ui import run_chat_tui

    config = get_config()

    async def _chat():
        client = get_relay_client(config, relay_url)
        try:
            await run_chat_tui(
                client,
                model=model.value,
                log_level=log_level.value if log_level else None,
                max_attachment_bytes=config.max_attachment_bytes,
            )
        finally:
            await client.close()

    asyncio.run(_chat())


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send"),
    model: Provider = typer.Option(Provider.CLAUDE, "--model", "-m", help="Provider to use"),
    files: list[Path] = typer.Option(
        [],
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        help="File or image to attach (repeatable)"
    ),
    relay_url: str | None = typer.Option(None, "--relay-url", "-r", help="Relay base URL"),
    raw: bool = typer.Option(False, "--raw", help="Print the reply without Markdown rendering"),
):
    """Send a single message through the relay and print the reply."""
    config = get_config()

    async def _ask():
        try:
            attachments = [load_attachment(p, max_bytes=config.max_attachment_bytes) for p in files]
        except AttachmentError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)

        client = get_relay_client(config, relay_url)
        try:
            with console.status(f"[dim]Waiting for {model.value}...[/dim]"):
                reply = await client.send(
                    [ChatMessage(role="user", content=message, files=attachments)],
                    model.value,
                )
        except RelayError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await client.close()

        if raw:
            console.print(reply.text, markup=False, highlight=False)
        else:
            console.print(Panel(Markdown(reply.text), title=reply.model, border_style="cyan"))
        if reply.usage:
            console.print(
                f"[dim]Tokens: {reply.usage.get('prompt_tokens', 0)} in / "
                f"{reply.usage.get('completion_tokens', 0)} out[/dim]"
            )

    asyncio.run(_ask())


@app.command()
def health(
    relay_url: str | None = typer.Option(None, "--relay-url", "-r", help="Relay base URL"),
):
    """Check that the relay is up and which providers it can serve."""
    config = get_config()

    async def _health():
        client = get_relay_client(config, relay_url)
        try:
            status = await client.health()
        except RelayError as e:
            console.print(f"[red]x[/red] Relay at {client.base_url}: FAILED ({e})")
            raise typer.Exit(code=1)
        finally:
            await client.close()

        console.print(f"[green]+[/green] Relay at {client.base_url}: {status.get('status', 'unknown')}")
        providers = status.get("providers", [])
        for name in Provider:
            mark = "[green]+[/green]" if name.value in providers else "[red]x[/red]"
            console.print(f"{mark} {name.value}")

    asyncio.run(_health())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
