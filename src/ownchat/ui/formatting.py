"""Text formatting utilities for the TUI.

Hides the details of text cleanup before rendering.
"""

import re
from typing import NamedTuple

from ..llm.models import Attachment

_LATEX_SYMBOLS = {
    r"\times": "x",
    r"\cdot": "*",
    r"\pm": "+/-",
    r"\leq": "<=",
    r"\geq": ">=",
    r"\neq": "!=",
    r"\approx": "~=",
    r"\infty": "infinity",
    r"\ldots": "...",
    r"\cdots": "...",
    r"\pi": "pi",
}


def clean_latex(text: str) -> str:
    """Strip LaTeX math delimiters and common commands that Rich cannot render.

    Code spans and fenced blocks are left untouched.
    """
    segments = re.split(r"(```.*?```|`[^`\n]*`)", text, flags=re.DOTALL)
    for i in range(0, len(segments), 2):
        segment = segments[i]
        segment = re.sub(r"\\[()\[\]]", "", segment)
        segment = re.sub(r"\$\$", "", segment)
        segment = re.sub(r"(?<!\\)\$(?![\d\s])([^$\n]+?)(?<!\\)\$(?!\d)", r"\1", segment)
        segment = re.sub(r"\\frac\{([^}]*)\}\{([^}]*)\}", r"(\1)/(\2)", segment)
        segment = re.sub(r"\\sqrt\{([^}]*)\}", r"sqrt(\1)", segment)
        segment = re.sub(r"\\(?:text|textbf|mathrm|mathbf)\{([^}]*)\}", r"\1", segment)
        for command, replacement in _LATEX_SYMBOLS.items():
            segment = segment.replace(command, replacement)
        segments[i] = segment
    return "".join(segments)


class CodeBlock(NamedTuple):
    language: str
    code: str


_FENCE_RE = re.compile(
    r"^[ \t]*```[ \t]*([\w+#.-]*)[^\n]*\n(.*?)^[ \t]*```[ \t]*$",
    re.DOTALL | re.MULTILINE,
)


def extract_code_blocks(text: str) -> list[CodeBlock]:
    """Fenced code blocks in a Markdown reply, in order of appearance.

    The language is the fence's info word ("text" when absent); the code
    excludes the fences and the trailing newline.
    """
    return [
        CodeBlock(match.group(1) or "text", match.group(2).rstrip("\n"))
        for match in _FENCE_RE.finditer(text)
    ]


def format_size(size: int) -> str:
    """Human-readable byte count, e.g. '1.5 KB'."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def describe_files(files: list[Attachment]) -> str:
    """One-line summary of attachments, e.g. 'chart.png (12.0 KB), notes.md (1.1 KB)'."""
    return ", ".join(f"{f.name} ({format_size(f.size)})" for f in files)
