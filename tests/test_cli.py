"""Tests for the Typer command line interface."""
import re

import pytest
from typer.testing import CliRunner

from xrozen.cli import providers
from xrozen.cli.app import app
from xrozen.llm import LLMProvider, LLMResponse

runner = CliRunner()


class CannedLLM(LLMProvider):
    """LLM provider that always gives the same answer."""

    async def chat_completion(self, messages, temperature=0.7, max_tokens=None):
        return LLMResponse(content="Storyboard first, then book the crew.", model=self.model)

    async def close(self) -> None:
        pass

    @property
    def model(self) -> str:
        return "canned"


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path):
    """Point the CLI at a throwaway SQLite file with a canned LLM."""
    monkeypatch.setenv("XROZEN_BACKEND", "sqlite")
    monkeypatch.setenv("XROZEN_SQLITE_PATH", str(tmp_path / "xrozen.db"))
    monkeypatch.setenv("XROZEN_USER_ID", "user-1")
    for name in ("XROZEN_ASSISTANT", "LLM_PROVIDER", "OPENAI_API_KEY", "DEEPSEEK_API_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(providers, "get_llm", lambda console=None: CannedLLM())


def _conversation_id(output: str) -> str:
    match = re.search(r"Conversation: (\S+)", output)
    assert match, output
    return match.group(1)


class TestConversationCommands:
    """Tests for conversations, new, show and delete."""

    def test_empty_list(self):
        result = runner.invoke(app, ["conversations"])

        assert result.exit_code == 0
        assert "No conversations yet" in result.output

    def test_new_then_list(self):
        """Test that a created conversation is listed."""
        created = runner.invoke(app, ["new", "--title", "Roadmap"])
        listed = runner.invoke(app, ["conversations"])

        assert created.exit_code == 0
        assert "Created conversation" in created.output
        assert listed.exit_code == 0
        assert "Roadmap" in listed.output

    def test_show_unknown_conversation(self):
        result = runner.invoke(app, ["show", "missing"])

        assert result.exit_code == 1
        assert "Conversation not found: missing" in result.output

    def test_delete_removes_conversation(self):
        """Test deleting without the confirmation prompt."""
        sent = runner.invoke(app, ["send", "Plan the shoot"])
        conversation_id = _conversation_id(sent.output)

        deleted = runner.invoke(app, ["delete", conversation_id, "--yes"])
        listed = runner.invoke(app, ["conversations"])

        assert deleted.exit_code == 0
        assert "Conversation deleted successfully" in deleted.output
        assert "No conversations yet" in listed.output

    def test_delete_can_be_aborted(self):
        """Test that answering no keeps the conversation."""
        runner.invoke(app, ["new", "--title", "Keep me"])

        result = runner.invoke(app, ["delete", "whatever"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert "Keep me" in runner.invoke(app, ["conversations"]).output


class TestSendCommand:
    """Tests for send."""

    def test_send_starts_conversation(self):
        """Test that a first message creates a conversation titled after it."""
        result = runner.invoke(app, ["send", "Plan the marketing video"])

        assert result.exit_code == 0
        assert "Storyboard first, then book the crew." in result.output
        conversation_id = _conversation_id(result.output)

        shown = runner.invoke(app, ["show", conversation_id])
        assert shown.exit_code == 0
        assert "Plan the marketing video" in shown.output
        assert "Storyboard first" in shown.output

    def test_send_continues_conversation(self):
        """Test that --conversation appends to an existing thread."""
        first = runner.invoke(app, ["send", "Hello"])
        conversation_id = _conversation_id(first.output)

        second = runner.invoke(app, ["send", "And then?", "--conversation", conversation_id])

        assert second.exit_code == 0
        assert _conversation_id(second.output) == conversation_id
        shown = runner.invoke(app, ["show", conversation_id]).output
        assert shown.count("XrozenAI") == 2

    def test_blank_message(self):
        result = runner.invoke(app, ["send", "   "])

        assert result.exit_code == 1
        assert "Message is empty" in result.output

    def test_send_to_unknown_conversation(self):
        result = runner.invoke(app, ["send", "Hello", "-c", "missing"])

        assert result.exit_code == 1
        assert "Conversation not found" in result.output

    def test_send_without_llm(self, monkeypatch):
        """Test that an unconfigured LLM fails the send with its reason."""
        monkeypatch.setattr(providers, "get_llm", lambda console=None: None)

        result = runner.invoke(app, ["send", "Hello"])

        assert result.exit_code == 1
        assert "LLM provider not configured" in result.output


class TestChatCommand:
    """Tests for chat."""

    def test_chat_continues_conversation(self):
        """Test that chat -c shows the thread and appends to it."""
        conversation_id = _conversation_id(runner.invoke(app, ["send", "Hello"]).output)

        result = runner.invoke(app, ["chat", "-c", conversation_id], input="And then?\nq\n")

        assert result.exit_code == 0
        assert "Hello" in result.output
        assert "Goodbye" in result.output
        shown = runner.invoke(app, ["show", conversation_id]).output
        assert "And then?" in shown

    def test_chat_unknown_conversation(self):
        result = runner.invoke(app, ["chat", "-c", "missing"], input="hi\nq\n")

        assert result.exit_code == 1
        assert "Conversation not found: missing" in result.output

    def test_chat_cannot_open_other_users_conversation(self, monkeypatch):
        """Test that another user's conversation is refused and left untouched."""
        conversation_id = _conversation_id(runner.invoke(app, ["send", "secret plan"]).output)

        monkeypatch.setenv("XROZEN_USER_ID", "user-2")
        result = runner.invoke(app, ["chat", "-c", conversation_id], input="hi\nq\n")

        assert result.exit_code == 1
        assert "Conversation not found" in result.output
        monkeypatch.setenv("XROZEN_USER_ID", "user-1")
        shown = runner.invoke(app, ["show", conversation_id]).output
        assert "secret plan" in shown
        assert shown.count("XrozenAI") == 1


class TestEnvironment:
    """Tests for configuration and sign-in errors."""

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("XROZEN_BACKEND", "redis")

        result = runner.invoke(app, ["conversations"])

        assert result.exit_code == 1
        assert "Unsupported store backend" in result.output

    def test_rest_backend_without_url(self, monkeypatch):
        monkeypatch.setenv("XROZEN_BACKEND", "rest")
        monkeypatch.delenv("XROZEN_URL", raising=False)

        result = runner.invoke(app, ["conversations"])

        assert result.exit_code == 1
        assert "XROZEN_URL" in result.output

    def test_signed_out(self, monkeypatch):
        """Test that a missing user is reported with a sign-in hint."""
        monkeypatch.setenv("XROZEN_USER_ID", "")

        result = runner.invoke(app, ["conversations"])

        assert result.exit_code == 1
        assert "User not authenticated" in result.output

    def test_health(self):
        result = runner.invoke(app, ["health"])

        assert result.exit_code == 0
        assert "Store (sqlite): OK" in result.output
        assert "Identity: user-1" in result.output

    def test_health_signed_out(self, monkeypatch):
        monkeypatch.setenv("XROZEN_USER_ID", "")

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 1
        assert "NOT SIGNED IN" in result.output
