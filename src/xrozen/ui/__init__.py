"""Terminal UI module for xrozen.

Provides a Textual-based TUI for chatting with XrozenAI.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (sidebar, message list, input, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette and theme configuration
- screens.py: Modal dialogs (delete confirmation)
- callbacks.py: Session integration (toasts, log records)
- app.py: Application orchestration (user interaction flow)
"""

from .app import XrozenApp, run_textual_tui
from .callbacks import PanelLogHandler, TextualNotifier
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, ConversationList, DebugPanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ConversationList",
    "DebugPanel",
    "LogLevel",
    "PanelLogHandler",
    "TextualNotifier",
    "XrozenApp",
    "run_textual_tui",
]
