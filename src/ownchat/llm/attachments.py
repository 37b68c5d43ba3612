"""Attachment decoding shared by all providers.

Hides how inline file payloads are decoded and which MIME types each
provider can accept natively.
"""

import base64
import binascii
import mimetypes
from pathlib import Path

from .models import Attachment

# Image formats accepted as native image blocks by both providers
IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

DOCUMENT_TYPES = frozenset({"application/pdf"})

# Non text/* types that still decode to readable text
TEXT_LIKE_TYPES = frozenset({
    "application/json",
    "application/xml",
    "application/x-yaml",
    "application/yaml",
    "application/javascript",
    "application/x-python-code",
    "application/x-sh",
    "application/sql",
    "application/toml",
})

TEXT_SUFFIXES = frozenset({
    ".py", ".md", ".txt", ".json", ".yaml", ".yml", ".toml", ".csv", ".ts",
    ".tsx", ".js", ".jsx", ".html", ".css", ".sql", ".sh", ".rs", ".go",
    ".java", ".c", ".h", ".cpp", ".rb", ".ini", ".cfg", ".log", ".xml",
})

DEFAULT_MAX_ATTACHMENT_BYTES = 20 * 1024 * 1024


class AttachmentError(ValueError):
    """Raised when an attachment cannot be decoded or loaded."""


def decode_payload(attachment: Attachment) -> bytes:
    """Decode the base64 payload of an attachment.

    Accepts both bare base64 and ``data:<mime>;base64,<payload>`` URLs.

    Raises:
        AttachmentError: If the payload is not valid base64
    """
    data = attachment.data
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(
            f"Attachment '{attachment.name}' is not valid base64: {e}"
        ) from e


def classify(attachment: Attachment) -> str:
    """Classify an attachment as image, document, text, media or binary."""
    mime = attachment.mime_type
    if mime in IMAGE_TYPES:
        return "image"
    if mime in DOCUMENT_TYPES:
        return "document"
    if mime.startswith("text/") or mime in TEXT_LIKE_TYPES:
        return "text"
    if mime.startswith(("audio/", "video/")):
        return "media"
    if Path(attachment.name).suffix.lower() in TEXT_SUFFIXES:
        return "text"
    return "binary"


def decode_text(attachment: Attachment) -> str:
    """Decode a text-like attachment as UTF-8, replacing invalid bytes."""
    return decode_payload(attachment).decode("utf-8", errors="replace")


def format_text_file(attachment: Attachment) -> str:
    """Render a text attachment as a fenced block labelled with its name."""
    return f"File: {attachment.name}\n```\n{decode_text(attachment)}\n```"


def unsupported_note(attachment: Attachment) -> str:
    return (
        f"[Attachment '{attachment.name}' ({attachment.mime_type}) "
        f"could not be forwarded to the model]"
    )


def load_attachment(
    path: str | Path,
    max_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES,
) -> Attachment:
    """Read a file from disk into an Attachment.

    Args:
        path: Path to the file
        max_bytes: Largest accepted file size

    Returns:
        Attachment with guessed MIME type and base64 payload

    Raises:
        AttachmentError: If the file is missing, not a file, or too large
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise AttachmentError(f"File not found: {file_path}")

    raw = file_path.read_bytes()
    if len(raw) > max_bytes:
        raise AttachmentError(
            f"File '{file_path.name}' is {len(raw):,} bytes; "
            f"the limit is {max_bytes:,} bytes"
        )

    mime_type, _ = mimetypes.guess_type(file_path.name)
    if mime_type is None and file_path.suffix.lower() in TEXT_SUFFIXES:
        mime_type = "text/plain"

    return Attachment(
        name=file_path.name,
        mime_type=mime_type or "application/octet-stream",
        size=len(raw),
        data=base64.b64encode(raw).decode("ascii"),
    )
