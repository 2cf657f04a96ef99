"""Pytest configuration and shared fixtures."""
import asyncio
import logging
from datetime import datetime, timedelta, timezone

import pytest

from xrozen.assistant import AssistantFunction, AssistantRequest, AssistantResponse
from xrozen.backend import StaticIdentityProvider
from xrozen.backend.in_memory import InMemoryConversationStore
from xrozen.log import LOGGER_NAME
from xrozen.session import CollectingNotifier, ConversationSessionManager

START = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


class StepClock:
    """Deterministic clock: every call returns a time one second later."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value


class FakeAssistant(AssistantFunction):
    """Assistant function double.

    Records every request; replies with ``reply`` or raises ``error``. When
    ``gate`` is set, each call waits for it before answering.
    """

    def __init__(self, reply: str = "Hello from XrozenAI", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.user_message_id: str | None = None
        self.assistant_message_id: str | None = None
        self.gate: asyncio.Event | None = None
        self.requests: list[AssistantRequest] = []
        self.closed = False

    async def invoke(self, request: AssistantRequest) -> AssistantResponse:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return AssistantResponse(
            response=self.reply,
            user_message_id=self.user_message_id,
            assistant_message_id=self.assistant_message_id,
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    """Return a deterministic step clock."""
    return StepClock()


@pytest.fixture
def store(clock):
    """Return an empty in-memory store sharing the test clock."""
    return InMemoryConversationStore(clock=clock)


@pytest.fixture
def identity():
    """Return an identity provider signed in as user-1."""
    return StaticIdentityProvider("user-1")


@pytest.fixture
def assistant():
    """Return a fake assistant function."""
    return FakeAssistant()


@pytest.fixture
def notifier():
    """Return a notifier that collects notifications."""
    return CollectingNotifier()


@pytest.fixture
def manager(identity, store, assistant, notifier, clock):
    """Return a session manager wired to the fakes above."""
    return ConversationSessionManager(identity, store, assistant, notifier, clock=clock)


@pytest.fixture(autouse=True)
def reset_xrozen_logger():
    """Remove handlers installed by entry points under test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
