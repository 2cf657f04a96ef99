"""Tests for the hosted REST backend, against a mocked HTTP transport."""
import json

import httpx
import pytest

from xrozen.backend import HostedClient
from xrozen.backend.models import Role
from xrozen.backend.rest import RestConversationStore, RestIdentityProvider
from xrozen.errors import TransportError

CONVERSATION_ROW = {
    "id": "c1",
    "user_id": "user-1",
    "title": "Roadmap",
    "created_at": "2024-01-01T10:00:00+00:00",
    "updated_at": "2024-01-01T10:02:00+00:00",
}

MESSAGE_ROW = {
    "id": "m1",
    "conversation_id": "c1",
    "role": "user",
    "content": "Hello",
    "created_at": "2024-01-01T10:01:00+00:00",
}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, body=None, error: Exception | None = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _client(recorder: Recorder, access_token: str | None = "user-token") -> HostedClient:
    return HostedClient(
        "https://project.example.co/",
        "anon-key",
        access_token=access_token,
        transport=httpx.MockTransport(recorder),
    )


class TestHostedClient:
    """Tests for HostedClient request handling."""

    @pytest.mark.asyncio
    async def test_sends_key_and_bearer_token(self):
        """Test the auth headers on every request."""
        recorder = Recorder(body=[])
        async with _client(recorder) as client:
            await client.request("GET", "/rest/v1/ai_conversations")

        assert recorder.last.url.host == "project.example.co"
        assert recorder.last.headers["apikey"] == "anon-key"
        assert recorder.last.headers["Authorization"] == "Bearer user-token"

    @pytest.mark.asyncio
    async def test_api_key_is_default_bearer(self):
        """Test that the API key is the bearer token without a session."""
        recorder = Recorder(body=[])
        async with _client(recorder, access_token=None) as client:
            await client.request("GET", "/rest/v1/ai_conversations")
            client.set_access_token("fresh-token")
            await client.request("GET", "/rest/v1/ai_conversations")

        assert recorder.requests[0].headers["Authorization"] == "Bearer anon-key"
        assert recorder.requests[1].headers["Authorization"] == "Bearer fresh-token"

    @pytest.mark.asyncio
    async def test_error_status_carries_detail(self):
        """Test that error responses become TransportError with the message."""
        recorder = Recorder(status_code=409, body={"message": "duplicate key value"})
        async with _client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.request("POST", "/rest/v1/ai_conversations", json={})

        assert exc_info.value.status_code == 409
        assert str(exc_info.value) == "duplicate key value"

    @pytest.mark.asyncio
    async def test_error_without_body(self):
        """Test the fallback detail for an empty error body."""
        recorder = Recorder(status_code=502, body="")
        async with _client(recorder) as client:
            with pytest.raises(TransportError, match="HTTP 502"):
                await client.request("GET", "/rest/v1/ai_messages")

    @pytest.mark.asyncio
    async def test_network_failure(self):
        """Test that connection errors become TransportError."""
        recorder = Recorder(error=httpx.ConnectError("connection refused"))
        async with _client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.request("GET", "/rest/v1/ai_messages")

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)


class TestRestConversationStore:
    """Tests for RestConversationStore."""

    @pytest.mark.asyncio
    async def test_list_conversations_query(self):
        """Test the filter and ordering of the conversation listing."""
        recorder = Recorder(body=[CONVERSATION_ROW])
        async with _client(recorder) as client:
            conversations = await RestConversationStore(client).list_conversations("user-1")

        params = recorder.last.url.params
        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/rest/v1/ai_conversations"
        assert params["user_id"] == "eq.user-1"
        assert params["order"] == "updated_at.desc"
        assert [c.id for c in conversations] == ["c1"]
        assert conversations[0].updated_at.minute == 2

    @pytest.mark.asyncio
    async def test_list_messages_query(self):
        """Test the filter and ordering of the message listing."""
        recorder = Recorder(body=[MESSAGE_ROW])
        async with _client(recorder) as client:
            messages = await RestConversationStore(client).list_messages("c1")

        params = recorder.last.url.params
        assert recorder.last.url.path == "/rest/v1/ai_messages"
        assert params["conversation_id"] == "eq.c1"
        assert params["order"] == "created_at.asc"
        assert messages[0].role == Role.USER

    @pytest.mark.asyncio
    async def test_insert_conversation_returns_row(self):
        """Test that inserts ask for the stored row back."""
        recorder = Recorder(status_code=201, body=[CONVERSATION_ROW])
        async with _client(recorder) as client:
            conversation = await RestConversationStore(client).insert_conversation("user-1", "Roadmap")

        assert recorder.last.method == "POST"
        assert recorder.last.headers["Prefer"] == "return=representation"
        assert json.loads(recorder.last.content) == {"user_id": "user-1", "title": "Roadmap"}
        assert conversation.id == "c1"

    @pytest.mark.asyncio
    async def test_insert_without_row_fails(self):
        """Test that an empty insert echo is a failure."""
        recorder = Recorder(status_code=201, body=[])
        async with _client(recorder) as client:
            with pytest.raises(TransportError, match="no row"):
                await RestConversationStore(client).insert_conversation("user-1", "Roadmap")

    @pytest.mark.asyncio
    async def test_delete_messages_counts_rows(self):
        """Test that delete_messages reports the number of rows removed."""
        recorder = Recorder(body=[MESSAGE_ROW, {**MESSAGE_ROW, "id": "m2"}])
        async with _client(recorder) as client:
            removed = await RestConversationStore(client).delete_messages("c1")

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.params["conversation_id"] == "eq.c1"
        assert removed == 2

    @pytest.mark.asyncio
    async def test_delete_missing_conversation(self):
        """Test that deleting nothing reports False."""
        recorder = Recorder(body=[])
        async with _client(recorder) as client:
            assert await RestConversationStore(client).delete_conversation("gone") is False

        assert recorder.last.url.params["id"] == "eq.gone"

    @pytest.mark.asyncio
    async def test_malformed_rows(self):
        """Test that rows missing fields are a transport failure."""
        recorder = Recorder(body=[{"id": "c1"}])
        async with _client(recorder) as client:
            with pytest.raises(TransportError, match="Malformed Conversation row"):
                await RestConversationStore(client).list_conversations("user-1")

    @pytest.mark.asyncio
    async def test_non_list_body(self):
        """Test that a JSON object where rows are expected is rejected."""
        recorder = Recorder(body={"rows": []})
        async with _client(recorder) as client:
            with pytest.raises(TransportError, match="Expected a list"):
                await RestConversationStore(client).list_messages("c1")

    @pytest.mark.asyncio
    async def test_custom_table_names(self):
        """Test that table names are configurable."""
        recorder = Recorder(body=[])
        async with _client(recorder) as client:
            store = RestConversationStore(client, conversations_table="chats")
            await store.list_conversations("user-1")

        assert recorder.last.url.path == "/rest/v1/chats"


class TestRestIdentityProvider:
    """Tests for RestIdentityProvider."""

    @pytest.mark.asyncio
    async def test_returns_current_user(self):
        """Test a valid session token."""
        recorder = Recorder(body={"id": "user-1", "email": "ana@example.com"})
        async with _client(recorder) as client:
            user = await RestIdentityProvider(client).get_current_user()

        assert recorder.last.url.path == "/auth/v1/user"
        assert user.id == "user-1"
        assert user.email == "ana@example.com"

    @pytest.mark.asyncio
    async def test_rejected_token_means_signed_out(self):
        """Test that 401 is reported as no user."""
        recorder = Recorder(status_code=401, body={"msg": "invalid JWT"})
        async with _client(recorder) as client:
            assert await RestIdentityProvider(client).get_current_user() is None

    @pytest.mark.asyncio
    async def test_no_token_skips_request(self):
        """Test that no session token means no user and no request."""
        recorder = Recorder(body={"id": "user-1"})
        async with _client(recorder, access_token=None) as client:
            assert await RestIdentityProvider(client).get_current_user() is None

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_server_error_propagates(self):
        """Test that other failures are transport errors."""
        recorder = Recorder(status_code=500, body={"message": "boom"})
        async with _client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await RestIdentityProvider(client).get_current_user()

        assert exc_info.value.status_code == 500
