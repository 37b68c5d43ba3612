"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, footer)

To add a new theme, define it here and register it in the app.
"""

from textual.theme import Theme

# Dark slate surfaces with an amber accent for user messages and selection
EMBER = Theme(
    name="ownchat-ember",
    primary="#7aa2f7",      # Blue - chat panel
    secondary="#bb9af7",    # Violet - assistant replies
    accent="#f59e0b",       # Amber - user messages, dialogs
    foreground="#e5e7eb",
    background="#0f1117",
    success="#9ece6a",
    warning="#e0af68",
    error="#f7768e",
    surface="#1a1b26",
    panel="#16161e",
    dark=True,
    variables={
        "block-cursor-foreground": "#0f1117",
        "block-cursor-background": "#f59e0b",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#e5e7eb",
        "input-cursor-foreground": "#0f1117",
        "input-selection-background": "#f59e0b 30%",

        "border": "#3b4261",
        "border-blurred": "#292e42",

        "scrollbar": "#292e42",
        "scrollbar-hover": "#3b4261",
        "scrollbar-active": "#f59e0b",
        "scrollbar-background": "#16161e",

        "footer-foreground": "#a9b1d6",
        "footer-background": "#0f1117",
        "footer-key-foreground": "#f59e0b",
        "footer-key-background": "#292e42",

        "text-muted": "#737aa2",
    },
)
