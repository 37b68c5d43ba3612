"""Modal screens for the TUI.

This module hides the design decisions about:
- How a message is edited before it is resent
- How a file path is asked for when attaching a file
- Dialog layout and keyboard shortcuts
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, TextArea

_DIALOG_CSS = """
{name} {{
    align: center middle;
    background: $background 70%;
}}

{name} .dialog {{
    width: 80;
    height: auto;
    max-height: 30;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}}

{name} .dialog-title {{
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
    border-bottom: solid $border;
    margin-bottom: 1;
}}

{name} .dialog-buttons {{
    width: 100%;
    height: 3;
    align: center middle;
    margin-top: 1;
}}

{name} .dialog-buttons Button {{
    margin: 0 1;
    min-width: 10;
}}
"""


class EditMessageScreen(ModalScreen[str | None]):
    """Edit a user message. Dismisses with the new text, or None when cancelled."""

    CSS = _DIALOG_CSS.format(name="EditMessageScreen") + """
    EditMessageScreen #edit-area {
        height: 12;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("ctrl+s", "save", "Save & resend", show=False),
    ]

    def __init__(self, content: str) -> None:
        super().__init__()
        self._content = content

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Edit message (later messages will be removed)", classes="dialog-title")
            yield TextArea(self._content, id="edit-area", show_line_numbers=False)
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save & resend", id="btn-save", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#edit-area", TextArea).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self.action_save()
        else:
            self.action_cancel()

    def action_save(self) -> None:
        text = self.query_one("#edit-area", TextArea).text
        if not text.strip():
            self.app.notify("Message cannot be empty", severity="warning", timeout=2)
            return
        self.dismiss(text)

    def action_cancel(self) -> None:
        self.dismiss(None)


class AttachFileScreen(ModalScreen[str | None]):
    """Ask for a file path. Dismisses with the path, or None when cancelled."""

    CSS = _DIALOG_CSS.format(name="AttachFileScreen")

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Attach a file or image", classes="dialog-title")
            yield Input(placeholder="Path to file, e.g. ~/Pictures/chart.png", id="path-input")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Attach", id="btn-attach", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#path-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._finish(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-attach":
            self._finish(self.query_one("#path-input", Input).value)
        else:
            self.action_cancel()

    def _finish(self, value: str) -> None:
        path = value.strip()
        self.dismiss(path or None)

    def action_cancel(self) -> None:
        self.dismiss(None)
