"""UI constants: log levels, model labels and user-facing strings."""

import logging


class LogLevel:
    """Levels for the in-app log panel, numerically aligned with stdlib logging."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def name(cls, level: int) -> str:
        return _LEVEL_NAMES.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Map "debug", "info", "warning" or "error" to a level; anything else is DEBUG."""
        return _LEVELS_BY_NAME.get(level_str.strip().lower(), cls.DEBUG)


_LEVEL_NAMES = {
    level: logging.getLevelName(level)
    for level in (LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARNING, LogLevel.ERROR)
}
_LEVELS_BY_NAME = {name.lower(): level for level, name in _LEVEL_NAMES.items()}


MODELS = ("claude", "gemini")
MODEL_LABELS = {"claude": "Claude AI", "gemini": "Gemini AI"}

CANCELLED_MESSAGE = "⚠️ Request was cancelled by user."
ERROR_MESSAGE_TEMPLATE = (
    "❌ Sorry, I encountered an error. "
    "Please make sure the relay server is running at {url}."
)

SUGGESTED_PROMPTS = (
    "What is the value of 6+9?",
    "Explain quantum computing simply",
    "Write a Python sorting algorithm",
    "Help me brainstorm a startup idea",
)

INPUT_HISTORY_MAX_SIZE = 100
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
MESSAGE_TIMESTAMP_FORMAT = "%H:%M"
