"""Main Textual TUI application.

Orchestrates the UI components and routes user interaction to the
ConversationSessionManager. The app never changes chat state itself: it
calls the manager from background workers and re-renders whenever the
manager publishes a new SessionState.
"""

import asyncio
import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, OptionList

from ..assistant.base import AssistantFunction
from ..backend.base import ConversationStore, IdentityProvider
from ..errors import AuthExpiredError
from ..log import LOGGER_NAME, configure_logging
from ..session import Committed, ConversationSessionManager, Rejected, SessionState, decode_action_payload
from .callbacks import PanelLogHandler, TextualNotifier
from .config import LogLevel
from .screens import ConfirmationScreen
from .styles import APP_CSS
from .themes import XROZEN_NIGHT
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    ConversationList,
    DebugPanel,
    StatusLine,
    ThinkingIndicator,
)

logger = logging.getLogger(__name__)

SIGNED_OUT_MESSAGE = "Not signed in. Set XROZEN_ACCESS_TOKEN (or XROZEN_USER_ID) and try again."


class XrozenApp(App):
    """Textual TUI for XrozenAI chat."""

    CSS = APP_CSS
    TITLE = "XrozenAI"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_conversation", "New", priority=True),
        Binding("ctrl+x", "delete_conversation", "Delete", priority=True),
        Binding("ctrl+r", "refresh", "Refresh", priority=True),
        Binding("ctrl+y", "copy_last_response", "Copy Reply", priority=True),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
    ]

    def __init__(
        self,
        identity: IdentityProvider,
        store: ConversationStore,
        assistant: AssistantFunction,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._log_level = log_level
        self._backend = store.backend_type
        self._log_handler: PanelLogHandler | None = None
        self.manager = ConversationSessionManager(
            identity,
            store,
            assistant,
            TextualNotifier(self),
            on_auth_expired=self._signed_out,
        )
        self.manager.subscribe(self._on_state_changed)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        yield ConversationList(id="conversation-list")

        with Vertical(id="chat-column"):
            yield ChatHistoryWidget(id="chat-history")
            yield ThinkingIndicator(id="thinking")
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield StatusLine(id="status-line")
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(XROZEN_NIGHT)
        self.theme = "xrozen-night"
        self.sub_title = self._backend

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = PanelLogHandler(self, log_panel)
        configure_logging(self._log_level or "info", handler=self._log_handler)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.write_log("tui", f"Log panel enabled with level: {self._log_level.upper()}", LogLevel.INFO)
        else:
            log_panel.log_level = LogLevel.INFO

        self.call_later(self._render_state)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        self._load()

    def detach_log_handler(self) -> None:
        """Stop routing log records to the log panel."""
        if self._log_handler is not None:
            logging.getLogger(LOGGER_NAME).removeHandler(self._log_handler)
            self._log_handler = None

    def _signed_out(self) -> None:
        self.exit(return_code=1, message=SIGNED_OUT_MESSAGE)

    def _on_state_changed(self, state: SessionState) -> None:
        self.call_later(self._render_state)

    async def _render_state(self) -> None:
        """Redraw every panel from the manager's current state."""
        state = self.manager.state
        selected = state.selected_conversation

        sidebar = self.query_one("#conversation-list", ConversationList)
        sidebar.show_conversations(state.conversations, state.selected_id)
        sidebar.disabled = state.pending

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        await chat.show_messages(
            state.messages,
            pending_message_id=state.pending_message_id,
            title=selected.title if selected else None,
        )

        self.query_one("#thinking", ThinkingIndicator).set_active(state.pending)
        self.query_one("#chat-input-bar", ChatInputBar).set_sending(state.pending)
        self.query_one("#status-line", StatusLine).show_status(
            self._backend, len(state.conversations), state.pending
        )

    @work(group="session")
    async def _load(self) -> None:
        try:
            conversations = await self.manager.load()
        except AuthExpiredError:
            self._signed_out()
            return
        logger.info("Loaded %d conversation(s)", len(conversations))

    @work(group="session")
    async def _select(self, conversation_id: str) -> None:
        await self.manager.select_conversation(conversation_id)

    @work(group="session")
    async def _create(self) -> None:
        if await self.manager.create_conversation() is not None:
            self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    @work(group="session")
    async def _delete(self, conversation_id: str) -> None:
        await self.manager.delete_conversation(conversation_id)

    @work(group="session")
    async def _refresh(self) -> None:
        try:
            await self.manager.list_conversations()
        except AuthExpiredError:
            self._signed_out()

    @work(group="send")
    async def _send(self, text: str) -> None:
        outcome = await self.manager.send_message(text)
        if isinstance(outcome, Rejected):
            if outcome.reason == "pending":
                self.notify("Wait for the current reply", severity="warning", timeout=2)
            return
        if isinstance(outcome, Committed) and outcome.action_payload is not None:
            action = decode_action_payload(outcome.action_payload)
            logger.info("Assistant requested action: %s", action if action is not None else "undecodable")

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Open the conversation picked in the sidebar."""
        conversation_id = event.option.id
        if conversation_id and conversation_id != self.manager.state.selected_id:
            self._select(conversation_id)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._send(event.value)

    def action_new_conversation(self) -> None:
        """Create and open an empty conversation."""
        self._create()

    def action_delete_conversation(self) -> None:
        """Delete the selected conversation after confirmation."""
        conversation = self.manager.state.selected_conversation
        if conversation is None:
            self.notify("No conversation selected", severity="warning", timeout=2)
            return

        def _confirmed(confirmed: bool | None) -> None:
            if confirmed:
                self._delete(conversation.id)

        self.push_screen(
            ConfirmationScreen(
                f'Delete "{conversation.title}" and all of its messages?',
                title="Delete conversation",
            ),
            _confirmed,
        )

    def action_refresh(self) -> None:
        """Reload the conversation list."""
        self._refresh()

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Reply copied", timeout=2)
        else:
            self.notify("No reply to copy", severity="warning", timeout=2)


async def run_textual_tui(
    identity: IdentityProvider,
    store: ConversationStore,
    assistant: AssistantFunction,
    log_level: str | None = None,
) -> int:
    """Run the Textual TUI.

    The collaborators must already be connected; closing them is left to
    the caller.

    Args:
        identity: Identity provider for the signed-in user
        store: Conversation store
        assistant: Assistant function answering messages
        log_level: Log level for panel (debug/info/warning/error), None to hide

    Returns:
        The app's return code
    """
    app = XrozenApp(identity=identity, store=store, assistant=assistant, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        app.detach_log_handler()
    return app.return_code or 0
