"""Main Textual TUI application.

Orchestrates the UI components and runs relay requests as background workers.
"""

import asyncio

import pyperclip
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header
from textual.worker import Worker, WorkerState

from ..llm.attachments import DEFAULT_MAX_ATTACHMENT_BYTES, AttachmentError, load_attachment
from ..llm.models import Attachment
from .config import MODEL_LABELS, LogLevel
from .conversation import ChatClient, Conversation
from .formatting import describe_files
from .screens import AttachFileScreen, EditMessageScreen
from .styles import APP_CSS
from .themes import EMBER
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, StatusBar, WelcomePanel


class ChatApp(App):
    """Textual chat client for the OwnChat relay."""

    CSS = APP_CSS
    TITLE = "OwnAI Chat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("escape", "cancel_request", "Cancel"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+t", "toggle_model", "Model"),
        Binding("ctrl+o", "attach_file", "Attach"),
        Binding("ctrl+e", "edit_last", "Edit Last"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        client: ChatClient,
        model: str = "claude",
        log_level: str | None = None,
        max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES,
    ) -> None:
        super().__init__()
        self._client = client
        self._log_level = log_level
        self._max_attachment_bytes = max_attachment_bytes
        self._pending_files: list[Attachment] = []
        self._current_worker: Worker | None = None
        self.conversation = Conversation(model=model)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield DebugPanel(id="debug-panel")
        with Vertical(id="bottom-bar"):
            yield StatusBar(id="status")
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(EMBER)
        self.theme = "ownchat-ember"

        if self._log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._log("info", f"Relay: {self._client.base_url}")
        self._refresh()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def _log(self, level: str, message: str, component: str = "TUI") -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        getattr(log_panel, level)(component, message)

    def _refresh(self) -> None:
        """Re-render history and status from the conversation."""
        conv = self.conversation
        self.sub_title = f"{MODEL_LABELS[conv.model]} | {self._client.base_url}"
        self.query_one("#chat-history", ChatHistoryWidget).sync(
            conv.messages, conv.model, conv.is_loading
        )
        self.query_one("#status", StatusBar).update_status(
            model=conv.model,
            message_count=len(conv),
            is_loading=conv.is_loading,
            pending_files=describe_files(self._pending_files),
            usage=conv.last_usage,
        )
        self.query_one("#chat-input-bar", ChatInputBar).has_attachments = bool(self._pending_files)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self.conversation.is_loading:
            self.notify("Wait for the reply or press Esc to cancel", severity="warning", timeout=2)
            return
        if not self.conversation.submit(event.value, self._pending_files):
            return

        self._pending_files = []
        self._start_request()

    def on_chat_input_bar_attach_requested(self, event: ChatInputBar.AttachRequested) -> None:
        self.action_attach_file()

    def on_welcome_panel_prompt_chosen(self, event: WelcomePanel.PromptChosen) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).set_text(event.text)

    def on_chat_history_widget_edit_requested(self, event: ChatHistoryWidget.EditRequested) -> None:
        self._open_editor(event.index)

    def _start_request(self) -> None:
        self._log("info", f"Sending {len(self.conversation.outgoing())} message(s) to {self.conversation.model}", "RELAY")
        self._current_worker = self._request_reply()
        self._refresh()

    @work(exclusive=True, exit_on_error=False)
    async def _request_reply(self) -> None:
        """Await the relay as a background async worker."""
        await self.conversation.request_reply(self._client)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker is not self._current_worker:
            return

        conv = self.conversation
        if event.state == WorkerState.SUCCESS:
            if conv.last_error:
                self._log("error", conv.last_error, "RELAY")
                self.notify("Request failed", severity="error", timeout=3)
            else:
                self._log("info", f"Reply received (usage: {conv.last_usage})", "RELAY")
        elif event.state == WorkerState.CANCELLED:
            # A worker cancelled before it started never reaches request_reply
            conv.mark_cancelled()
            self._log("warning", "Request cancelled", "RELAY")
            self.notify("Cancelled", severity="warning", timeout=2)
        elif event.state == WorkerState.ERROR:
            error = str(event.worker.error)
            conv.fail(error, self._client.base_url)
            self._log("error", f"Unexpected error: {error}", "RELAY")
            self.notify(f"Error: {error[:50]}", severity="error", timeout=5)
        else:
            return

        self._current_worker = None
        self._refresh()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def _open_editor(self, index: int) -> None:
        if self.conversation.is_loading:
            self.notify("Cannot edit while waiting for a reply", severity="warning", timeout=2)
            return
        message = self.conversation.messages[index]

        def _on_edited(content: str | None) -> None:
            if content is None:
                return
            if self.conversation.edit(index, content):
                self._log("info", f"Edited message {index}; history truncated")
                self._start_request()

        self.push_screen(EditMessageScreen(message.content), _on_edited)

    def action_cancel_request(self) -> None:
        """Cancel the in-flight request."""
        if self._current_worker is not None and self._current_worker.is_running:
            self._current_worker.cancel()

    def action_clear_chat(self) -> None:
        """Clear the chat history, dropping any in-flight reply."""
        if self._current_worker is not None:
            worker, self._current_worker = self._current_worker, None
            worker.cancel()
        self.conversation.clear()
        self._pending_files = []
        self._refresh()
        self.notify("Chat cleared", timeout=2)

    def action_toggle_model(self) -> None:
        model = self.conversation.toggle_model()
        self._refresh()
        self.notify(f"Using {MODEL_LABELS[model]}", timeout=2)

    def action_edit_last(self) -> None:
        index = self.conversation.last_user_index()
        if index is None:
            self.notify("No message to edit", severity="warning", timeout=2)
            return
        self._open_editor(index)

    def action_attach_file(self) -> None:
        def _on_path(path: str | None) -> None:
            if path is None:
                return
            try:
                attachment = load_attachment(path, max_bytes=self._max_attachment_bytes)
            except AttachmentError as e:
                self._log("warning", str(e), "FILES")
                self.notify(str(e), severity="error", timeout=4)
                return
            self._pending_files.append(attachment)
            self._log("info", f"Attached {attachment.name} ({attachment.mime_type}, {attachment.size} bytes)", "FILES")
            self._refresh()

        self.push_screen(AttachFileScreen(), _on_path)

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        response = self.conversation.last_response()
        if not response:
            self.notify("No response to copy", severity="warning")
            return
        try:
            pyperclip.copy(response)
        except pyperclip.PyperclipException:
            self.copy_to_clipboard(response)
        self.notify("Response copied")


async def run_chat_tui(
    client: ChatClient,
    model: str = "claude",
    log_level: str | None = None,
    max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES,
) -> None:
    """Run the Textual chat TUI.

    Args:
        client: Relay client used for every request
        model: Initial provider ('claude' or 'gemini')
        log_level: Log level for panel (debug/info/warning/error), None to hide
        max_attachment_bytes: Largest file that can be attached
    """
    app = ChatApp(
        client=client,
        model=model,
        log_level=log_level,
        max_attachment_bytes=max_attachment_bytes,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
