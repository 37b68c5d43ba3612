"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Welcome Panel - empty conversation
   ============================================ */
#welcome {
    height: auto;
    align: center top;
    padding: 2 4;
}

#welcome-title {
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
}

#welcome-subtitle {
    width: 100%;
    text-align: center;
    color: $text-muted;
    margin-bottom: 1;
}

.suggestion {
    width: 100%;
    margin: 0 0 1 0;
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    background: transparent;

    &:focus {
        background: $primary 10%;
    }
}

.message-header {
    text-style: bold;
}

.message-files {
    color: $text-muted;
    text-style: italic;
}

.code-actions {
    height: auto;
}

.copy-code {
    min-width: 12;
    height: 1;
    border: none;
    margin-right: 1;
}

.user-message {
    border-left: tall $accent;
    background: $accent 8%;

    & .message-header {
        color: $accent;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 6%;

    & .message-header {
        color: $secondary;
    }
}

.notice-message {
    border-left: tall $error;
    background: $error 8%;

    & .message-header {
        color: $error;
    }
}

.thinking {
    color: $warning;
    text-style: italic;
    padding: 0 2;
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

/* ============================================
   Bottom Bar - Status + Input
   ============================================ */
#bottom-bar {
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status {
    height: 1;
    padding: 0 1;
    margin: 1 0;
    background: $surface;
}

ChatInputBar {
    height: 5;
    border: round $accent 60%;
    background: $panel;

    &:focus-within {
        border: round $accent;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#attach-btn, #send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
    text-style: bold;
}
"""
