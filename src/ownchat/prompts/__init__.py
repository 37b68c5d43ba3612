"""Prompt loading.

The relay's system prompt ships as a text file next to this module and can
be overridden by a ./prompts/ directory in the working directory.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


def _candidates(name: str) -> list[Path]:
    filename = f"{name}.txt"
    return [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Return prompt text, preferring ./prompts/<name>.txt over the packaged copy.

    Raises:
        FileNotFoundError: If neither file exists
    """
    paths = _candidates(name)
    for path in paths:
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()
    searched = ", ".join(str(p) for p in paths)
    raise FileNotFoundError(f"Prompt '{name}' not found (looked in {searched})")


def get_system_prompt() -> str:
    """System prompt prepended to every relayed conversation."""
    return load_prompt("system")


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = ["clear_cache", "get_system_prompt", "load_prompt"]
