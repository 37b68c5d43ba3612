"""Terminal chat client for the OwnChat relay.

Module structure (each module hides a design decision):
- models.py: Message representation
- conversation.py: History rules for send, edit, cancel and clear
- widgets.py: Message rendering, input bar, status bar, log panel
- screens.py: Edit and attach dialogs
- styles.py / themes.py: Layout and colors
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatApp, run_chat_tui
from .config import CANCELLED_MESSAGE, ERROR_MESSAGE_TEMPLATE, LogLevel
from .conversation import Conversation
from .models import ChatMessage

__all__ = [
    "CANCELLED_MESSAGE",
    "ERROR_MESSAGE_TEMPLATE",
    "ChatApp",
    "ChatMessage",
    "Conversation",
    "LogLevel",
    "run_chat_tui",
]
