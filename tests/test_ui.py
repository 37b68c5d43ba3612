"""Smoke tests for the Textual chat app."""
import pytest
from textual.widgets import Button

from ownchat.ui import ChatApp
from ownchat.ui import widgets as widgets_module
from ownchat.ui.config import CANCELLED_MESSAGE
from ownchat.ui.formatting import CodeBlock, clean_latex, extract_code_blocks, format_size
from ownchat.ui.widgets import ChatInputBar, MessageView

from .conftest import FakeRelayClient

CODE_REPLY = """Here is the function:

```python
def add(a, b):
    return a + b
```

Run it with:

```
python add.py
```
"""


async def _settle(pilot, app: ChatApp, attempts: int = 50) -> None:
    """Let workers and message handlers run until no request is pending."""
    for _ in range(attempts):
        await pilot.pause()
        if not app.conversation.is_loading and app._current_worker is None:
            return


async def _drain(pilot, rounds: int = 5) -> None:
    for _ in range(rounds):
        await pilot.pause()


@pytest.fixture
def clipboard(monkeypatch):
    copied: list[str] = []
    monkeypatch.setattr(widgets_module.pyperclip, "copy", copied.append)
    return copied


class TestChatApp:
    """Tests for the chat app driven through Pilot."""

    @pytest.mark.asyncio
    async def test_submit_shows_reply(self):
        """Test that a submitted message is answered in the history."""
        client = FakeRelayClient(reply="Hi there")
        app = ChatApp(client=client)

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("Hello")
            )
            await _settle(pilot, app)

            assert [m.role for m in app.conversation.messages] == ["user", "assistant"]
            assert app.conversation.messages[1].content == "Hi there"
            assert client.sent == [(["Hello"], "claude")]

    @pytest.mark.asyncio
    async def test_cancel_in_flight_request(self):
        """Test that cancelling a pending request appends the cancel notice."""
        client = FakeRelayClient(block=True)
        app = ChatApp(client=client)

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("Tell me a long story")
            )
            await client.started.wait()

            app.action_cancel_request()
            await _settle(pilot, app)

            assert not app.conversation.is_loading
            assert app.conversation.messages[-1].content == CANCELLED_MESSAGE

    @pytest.mark.asyncio
    async def test_toggle_model_and_clear(self):
        """Test that the model toggle and clear actions update the conversation."""
        app = ChatApp(client=FakeRelayClient())

        async with app.run_test() as pilot:
            app.action_toggle_model()
            assert app.conversation.model == "gemini"

            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("Hi")
            )
            await _settle(pilot, app)
            assert len(app.conversation) == 2

            app.action_clear_chat()
            assert len(app.conversation) == 0


class TestCodeBlockCopy:
    """Tests for copying code blocks out of assistant replies."""

    @pytest.mark.asyncio
    async def test_reply_gets_copy_button_per_block(self, clipboard):
        """Test that each fenced block gets its own copy button."""
        app = ChatApp(client=FakeRelayClient(reply=CODE_REPLY))

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("Write add()")
            )
            await _settle(pilot, app)
            await _drain(pilot)

            buttons = list(app.query(".copy-code").results(Button))
            assert [str(b.label) for b in buttons] == ["Copy python", "Copy text"]

            buttons[0].press()
            await _drain(pilot)
            assert clipboard == ["def add(a, b):\n    return a + b"]

    @pytest.mark.asyncio
    async def test_copy_code_action_takes_last_block(self, clipboard):
        """Test that the y binding copies the reply's last code block."""
        app = ChatApp(client=FakeRelayClient(reply=CODE_REPLY))

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("Write add()")
            )
            await _settle(pilot, app)
            await _drain(pilot)

            views = list(app.query(MessageView))
            views[-1].action_copy_code()

            assert clipboard == ["python add.py"]

    @pytest.mark.asyncio
    async def test_user_message_has_no_copy_buttons(self, clipboard):
        """Test that code in the user's own message gets no buttons."""
        app = ChatApp(client=FakeRelayClient(reply="Looks fine"))

        async with app.run_test() as pilot:
            app.query_one("#chat-input-bar", ChatInputBar).post_message(
                ChatInputBar.Submitted("```\nprint(1)\n```")
            )
            await _settle(pilot, app)
            await _drain(pilot)

            assert not app.query(".copy-code")
            views = list(app.query(MessageView))
            views[0].action_copy_code()
            assert clipboard == []


class TestFormatting:
    """Tests for text formatting helpers."""

    def test_clean_latex_outside_code(self):
        """Test that math delimiters are stripped outside code spans only."""
        text = r"Since $x \leq y$ we get `$x$`"
        assert clean_latex(text) == "Since x <= y we get `$x$`"

    @pytest.mark.parametrize("text", [
        "It costs $5 and $10",
        "Prices: $3.50 or $ 4",
        "Budget $1,000 to $2,000 per month",
    ])
    def test_clean_latex_keeps_currency(self, text):
        """Test that dollar amounts are not mistaken for inline math."""
        assert clean_latex(text) == text

    def test_clean_latex_with_currency_and_math(self):
        """Test that inline math is stripped next to a dollar amount."""
        assert clean_latex(r"Pay $5 when $n \geq 2$") == "Pay $5 when n >= 2"

    def test_format_size(self):
        """Test that sizes are rendered in B, KB and MB."""
        assert format_size(512) == "512 B"
        assert format_size(2048) == "2.0 KB"
        assert format_size(3 * 1024 * 1024) == "3.0 MB"


class TestExtractCodeBlocks:
    """Tests for fenced code block extraction."""

    def test_blocks_in_order(self):
        """Test that blocks come back in order with their languages."""
        assert extract_code_blocks(CODE_REPLY) == [
            CodeBlock("python", "def add(a, b):\n    return a + b"),
            CodeBlock("text", "python add.py"),
        ]

    def test_no_blocks(self):
        """Test that prose and inline code yield no blocks."""
        assert extract_code_blocks("Use `pip install` and you're done.") == []

    def test_info_string_after_language(self):
        """Test that only the first word of the info string is the language."""
        text = "```js title=app.js\nconsole.log(1);\n```"
        assert extract_code_blocks(text) == [CodeBlock("js", "console.log(1);")]

    def test_blank_lines_inside_block_kept(self):
        """Test that interior blank lines are part of the code."""
        text = "```sh\necho a\n\necho b\n\n```"
        assert extract_code_blocks(text) == [CodeBlock("sh", "echo a\n\necho b")]

    def test_unterminated_fence_ignored(self):
        """Test that an unclosed fence is not treated as a block."""
        assert extract_code_blocks("```python\nprint('cut off')") == []
