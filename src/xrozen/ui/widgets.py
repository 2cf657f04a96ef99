"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Conversation sidebar rendering
- Chat message rendering (user text, assistant Markdown, pending state)
- Input history management
- Log rendering and level filtering
"""

from collections.abc import Sequence
from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Markdown, OptionList, RichLog, Static, TextArea
from textual.widgets.option_list import Option

from ..backend.models import Conversation, Message, Role
from .config import (
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIME_FORMAT,
    SIDEBAR_DATE_FORMAT,
    SIDEBAR_TITLE_MAX_LENGTH,
    THINKING_TEXT,
    LogLevel,
)


def _local_time(value: datetime, fmt: str) -> str:
    return value.astimezone().strftime(fmt)


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


class ConversationList(OptionList):
    """Sidebar listing the user's conversations, newest first."""

    BORDER_TITLE = "Conversations"

    def show_conversations(
        self, conversations: Sequence[Conversation], selected_id: str | None
    ) -> None:
        """Replace the listed conversations and highlight the selected one."""
        self.clear_options()
        self.add_options(
            Option(
                Text.assemble(
                    (_shorten(c.title, SIDEBAR_TITLE_MAX_LENGTH), "bold"),
                    "\n",
                    (_local_time(c.updated_at, SIDEBAR_DATE_FORMAT), "dim"),
                ),
                id=c.id,
            )
            for c in conversations
        )
        self.border_subtitle = str(len(conversations))

        for index, conversation in enumerate(conversations):
            if conversation.id == selected_id:
                self.highlighted = index
                break


class ChatHistoryWidget(VerticalScroll):
    """Scrollable message list of the selected conversation."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "No conversation"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[Message] = []

    async def show_messages(
        self,
        messages: Sequence[Message],
        pending_message_id: str | None = None,
        title: str | None = None,
    ) -> None:
        """Render ``messages`` in order, marking the optimistic one."""
        self._messages = list(messages)
        await self.remove_children()

        if not messages:
            await self.mount(
                Static(
                    "Ask XrozenAI about your projects, clients or workflow.\n"
                    "Press Ctrl+N to start a new conversation.",
                    classes="empty-state",
                )
            )
        else:
            await self.mount_all(
                self._render_message(m, pending=m.id == pending_message_id)
                for m in messages
            )

        self.border_title = title or "Chat"
        self.border_subtitle = f"{len(messages)} messages" if messages else "No conversation"
        self.scroll_end(animate=False)

    def _render_message(self, message: Message, pending: bool = False) -> Vertical:
        if message.role == Role.USER:
            classes = "chat-message user-message"
            header = f"> You [{_local_time(message.created_at, MESSAGE_TIME_FORMAT)}]"
            body = Static(message.content, markup=False, classes="message-content")
        else:
            classes = "chat-message assistant-message"
            header = f"< XrozenAI [{_local_time(message.created_at, MESSAGE_TIME_FORMAT)}]"
            body = Markdown(message.content, classes="message-content")

        if pending:
            classes += " pending-message"
            header += " sending..."

        container = Vertical(classes=classes)
        container.compose_add_child(Static(header, markup=False, classes="message-header"))
        container.compose_add_child(body)
        return container

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for message in reversed(self._messages):
            if message.role == Role.ASSISTANT:
                return message.content
        return None


class ThinkingIndicator(Static):
    """One-line indicator shown while a send is pending."""

    def on_mount(self) -> None:
        self.update(THINKING_TEXT)
        self.display = False

    def set_active(self, active: bool) -> None:
        self.display = active


class StatusLine(Static):
    """Backend and session summary under the chat."""

    def show_status(self, backend: str, conversations: int, pending: bool) -> None:
        state = "[yellow]sending[/]" if pending else "[green]idle[/]"
        self.update(
            f"[bold]Backend:[/] {backend}  "
            f"[bold]Conversations:[/] {conversations}  "
            f"[bold]State:[/] {state}"
        )


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="primary").with_tooltip(
            "Send message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Terminals do not report modifiers with Enter, so ctrl+j submits.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
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
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value or self.query_one("#send-btn", Button).disabled:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def set_sending(self, sending: bool) -> None:
        """Disable the Send button while a message is in flight."""
        self.query_one("#send-btn", Button).disabled = sending

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Log panel fed by the ``xrozen`` logger, with level filtering.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Hidden"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs,
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
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

    def write_log(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        level = LogLevel.clamp(level)
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        line = Text.assemble(
            (timestamp, "dim"),
            " ",
            (f"{LogLevel.name(level):<7}", level_colors[level]),
            " ",
            (f"[{component}]", "magenta"),
            " ",
            _shorten(message, LOG_MAX_MESSAGE_LENGTH),
        )
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self._update_subtitle()

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
