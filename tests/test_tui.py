"""Tests for the Textual TUI, driven headlessly."""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from textual.widgets import Button

from xrozen.backend import StaticIdentityProvider
from xrozen.backend.models import Conversation, Message, Role
from xrozen.ui import XrozenApp
from xrozen.ui.screens import ConfirmationScreen
from xrozen.ui.widgets import ChatHistoryWidget, ChatInputBar, ConversationList, ThinkingIndicator

T0 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(store):
    store.add_conversation(
        Conversation(id="A", user_id="user-1", title="Alpha", updated_at=T0 + timedelta(minutes=2))
    )
    store.add_conversation(Conversation(id="B", user_id="user-1", title="Beta", updated_at=T0))
    store.add_message(
        Message(id="a1", conversation_id="A", role=Role.USER, content="Hello", created_at=T0)
    )
    return store


async def _settle(app, pilot) -> None:
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestXrozenApp:
    """Tests for XrozenApp."""

    @pytest.mark.asyncio
    async def test_opens_most_recent_conversation(self, identity, seeded, assistant):
        """Test that startup lists conversations and shows the newest."""
        app = XrozenApp(identity, seeded, assistant)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            assert app.manager.state.selected_id == "A"
            assert app.query_one("#conversation-list", ConversationList).option_count == 2
            chat = app.query_one("#chat-history", ChatHistoryWidget)
            assert chat.border_title == "Alpha"
            assert len(chat.query(".chat-message")) == 1

    @pytest.mark.asyncio
    async def test_submit_shows_reply(self, identity, seeded, assistant):
        """Test that a submitted message and its reply are rendered."""
        app = XrozenApp(identity, seeded, assistant)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            app.query_one(ChatInputBar).post_message(ChatInputBar.Submitted("What's next?"))
            await _settle(app, pilot)

            chat = app.query_one("#chat-history", ChatHistoryWidget)
            assert [m.content for m in app.manager.state.messages] == [
                "Hello",
                "What's next?",
                "Hello from XrozenAI",
            ]
            assert len(chat.query(".chat-message")) == 3
            assert chat.get_last_response() == "Hello from XrozenAI"

    @pytest.mark.asyncio
    async def test_pending_send_locks_input(self, identity, seeded, assistant):
        """Test the thinking indicator and disabled Send button during a send."""
        assistant.gate = asyncio.Event()
        app = XrozenApp(identity, seeded, assistant)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            app.query_one(ChatInputBar).post_message(ChatInputBar.Submitted("Slow question"))
            while not assistant.requests:
                await pilot.pause()
            await pilot.pause()

            assert app.query_one("#thinking", ThinkingIndicator).display is True
            assert app.query_one("#send-btn", Button).disabled is True
            assert app.query_one("#conversation-list", ConversationList).disabled is True
            assert len(app.query(".pending-message")) == 1

            assistant.gate.set()
            await _settle(app, pilot)

            assert app.query_one("#thinking", ThinkingIndicator).display is False
            assert app.query_one("#send-btn", Button).disabled is False
            assert len(app.query(".pending-message")) == 0

    @pytest.mark.asyncio
    async def test_delete_after_confirmation(self, identity, seeded, assistant):
        """Test that ctrl+x then 'y' deletes the selected conversation."""
        app = XrozenApp(identity, seeded, assistant)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            await pilot.press("ctrl+x")
            await pilot.pause()
            assert isinstance(app.screen, ConfirmationScreen)

            await pilot.press("y")
            await _settle(app, pilot)

            assert [c.id for c in app.manager.state.conversations] == ["B"]
            assert app.manager.state.selected_id is None
            assert await seeded.get_conversation("A") is None

    @pytest.mark.asyncio
    async def test_delete_cancelled(self, identity, seeded, assistant):
        """Test that 'n' keeps the conversation."""
        app = XrozenApp(identity, seeded, assistant)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            await pilot.press("ctrl+x")
            await pilot.pause()
            await pilot.press("n")
            await _settle(app, pilot)

            assert [c.id for c in app.manager.state.conversations] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_new_conversation(self, identity, seeded, assistant):
        """Test that ctrl+n creates and selects an empty conversation."""
        app = XrozenApp(identity, seeded, assistant)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            await pilot.press("ctrl+n")
            await _settle(app, pilot)

            state = app.manager.state
            assert len(state.conversations) == 3
            assert state.conversations[0].title == "New Conversation"
            assert state.selected_id == state.conversations[0].id
            assert state.messages == ()

    @pytest.mark.asyncio
    async def test_signed_out_exits(self, seeded, assistant):
        """Test that the app exits with code 1 when nobody is signed in."""
        app = XrozenApp(StaticIdentityProvider(None), seeded, assistant)
        async with app.run_test():
            await app.workers.wait_for_complete()

        assert app.return_code == 1
