"""Widgets for the chat screen.

Each widget renders state it is handed and reports user intent upward as a
Textual Message; none of them talk to the relay.
"""

from datetime import datetime

import pyperclip
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    MODEL_LABELS,
    SUGGESTED_PROMPTS,
    LogLevel,
)
from .formatting import clean_latex, describe_files, extract_code_blocks
from .models import ChatMessage


def copy_text(widget: Static | Vertical | RichLog, text: str, label: str) -> None:
    """Copy text to the system clipboard, falling back to the terminal (OSC 52)."""
    try:
        pyperclip.copy(text)
        widget.app.notify(f"{label} copied", timeout=2)
    except pyperclip.PyperclipException:
        widget.app.copy_to_clipboard(text)
        widget.app.notify(f"{label} copied (terminal)", timeout=2)


class MessageView(Vertical):
    """One rendered chat message.

    Click or press c to copy it, e to edit it, y to copy its last code block.
    Assistant replies get one copy button per fenced code block.
    """

    can_focus = True

    BINDINGS = [
        Binding("c", "copy_message", "Copy", show=False),
        Binding("e", "edit_message", "Edit", show=False),
        Binding("y", "copy_code", "Copy Code", show=False),
    ]

    def __init__(self, message: ChatMessage, index: int, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._message = message
        self._index = index
        self._code_blocks = (
            extract_code_blocks(message.content)
            if message.role == "assistant" and not message.is_notice
            else []
        )

    def compose(self) -> ComposeResult:
        msg = self._message
        timestamp = msg.timestamp.strftime(MESSAGE_TIMESTAMP_FORMAT)
        if msg.role == "user":
            header = f"> You [{timestamp}]"
        else:
            header = f"< Assistant [{timestamp}]"
        yield Static(Text(header), classes="message-header")

        if msg.files:
            yield Static(Text(f"Attached: {describe_files(msg.files)}"), classes="message-files")

        if msg.role == "assistant" and not msg.is_notice:
            yield Markdown(clean_latex(msg.content), classes="message-content")
            if self._code_blocks:
                with Horizontal(classes="code-actions"):
                    for i, block in enumerate(self._code_blocks):
                        yield Button(
                            f"Copy {block.language}",
                            id=f"copy-code-{i}",
                            classes="copy-code",
                        )
        else:
            yield Static(Text(msg.content), classes="message-content")

    def on_click(self, event: Click) -> None:
        event.stop()
        self.action_copy_message()

    def action_copy_message(self) -> None:
        copy_text(self, self._message.content, "Message")

    def action_copy_code(self) -> None:
        if not self._code_blocks:
            self.app.notify("No code block in this message", severity="warning", timeout=2)
            return
        copy_text(self, self._code_blocks[-1].code, "Code")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        index = int((event.button.id or "").rsplit("-", 1)[-1])
        copy_text(self, self._code_blocks[index].code, "Code")

    def action_edit_message(self) -> None:
        if self._message.role == "user":
            self.post_message(ChatHistoryWidget.EditRequested(self._index))
        else:
            self.app.notify("Only your own messages can be edited", severity="warning", timeout=2)


class WelcomePanel(Vertical):
    """Shown while the conversation is empty; offers suggested prompts."""

    class PromptChosen(Message):
        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    def __init__(self, model: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._model = model

    def compose(self) -> ComposeResult:
        yield Static("Welcome to OwnAI Chat", id="welcome-title")
        yield Static(
            f"Your intelligent AI assistant powered by {MODEL_LABELS[self._model]}. Ask me anything!",
            id="welcome-subtitle",
        )
        for i, prompt in enumerate(SUGGESTED_PROMPTS):
            yield Button(prompt, id=f"suggestion-{i}", classes="suggestion")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.PromptChosen(str(event.button.label)))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history rendered from the conversation's message list."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    class EditRequested(Message):
        """Posted when the user asks to edit the message at index."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def sync(self, messages: list[ChatMessage], model: str, is_loading: bool) -> None:
        """Re-render the whole history.

        The list can shrink on edit and clear, so it is rebuilt rather than appended to.
        """
        self.remove_children()

        if not messages:
            self.mount(WelcomePanel(model, id="welcome"))
            self.border_subtitle = "Conversation history"
            return

        views: list[Static | Vertical] = []
        for index, msg in enumerate(messages):
            role_class = "user-message" if msg.role == "user" else "assistant-message"
            if msg.is_notice:
                role_class = "notice-message"
            views.append(MessageView(msg, index, classes=f"chat-message {role_class}"))

        if is_loading:
            views.append(Static(
                f"{MODEL_LABELS[model]} is thinking... (Esc to cancel)",
                classes="thinking",
            ))

        self.mount_all(views)
        count = len(messages)
        self.border_subtitle = f"{count} message{'s' if count != 1 else ''}"
        self.call_after_refresh(self.scroll_end, animate=False)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea, Attach and Send buttons."""

    class Submitted(Message):
        """Posted with the typed text when the user sends."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class AttachRequested(Message):
        """Message sent when the Attach button is pressed."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self.has_attachments = False

    def compose(self) -> ComposeResult:
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Attach", id="attach-btn", variant="primary").with_tooltip(
            "Attach a file (Ctrl+O)"
        )
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "send-btn":
            self._submit()
        elif event.button.id == "attach-btn":
            self.post_message(self.AttachRequested())

    def on_key(self, event) -> None:
        """Ctrl+J sends; Up/Down at the edges of the text walk the input history."""
        # Terminals do not report modifiers on Enter, hence Ctrl+J
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _cursor_at_start(self) -> bool:
        return self.query_one("#chat-input", TextArea).cursor_location == (0, 0)

    def _cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        elif self._history_index < len(self._history) - 1:
            self._history_index += 1
        else:
            self._history_index = -1
            text_area.text = ""
            return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value and not self.has_attachments:
            return
        if value and (not self._history or self._history[-1] != value):
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def set_text(self, value: str) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.text = value
        text_area.focus()

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class StatusBar(Static):
    """One-line status: model, message count, request state, pending files and usage."""

    def update_status(
        self,
        model: str,
        message_count: int,
        is_loading: bool,
        pending_files: str = "",
        usage: dict[str, int] | None = None,
    ) -> None:
        state = "[bold yellow]Waiting for reply[/]" if is_loading else "[green]Ready[/]"
        parts = [
            f"[bold cyan]Model:[/] {MODEL_LABELS[model]}",
            f"[bold magenta]Messages:[/] {message_count}",
            state,
        ]
        if usage:
            parts.append(
                f"[bold blue]Tokens:[/] {usage.get('total_tokens', 0):,} "
                f"[dim]({usage.get('prompt_tokens', 0):,}/{usage.get('completion_tokens', 0):,})[/]"
            )
        if pending_files:
            parts.append(f"[bold green]Attached:[/] {pending_files}")
        self.update("  ".join(parts))


class DebugPanel(RichLog):
    """Log panel for request tracing with level filtering.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Hidden"

    _LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    _COMPONENT_COLORS = {
        "TUI": "cyan",
        "RELAY": "magenta",
        "FILES": "green",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(*args, markup=True, highlight=False, auto_scroll=True, wrap=True, **kwargs)
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        self.display = False

    def record(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self._LEVEL_COLORS.get(level, "white")
        comp_color = self._COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] [{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] "
        )
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def toggle(self) -> bool:
        """Show or hide the panel; returns True if it is now visible."""
        self.display = not self.display
        self._update_subtitle()
        return self.display

    def get_plain_text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        copy_text(self, text, "Log")
