"""
Shared doubles and fixtures for the conversation session test suite.

Reply providers and transcribers here let a test decide exactly when (and
in which order) each asynchronous call completes.
"""

import asyncio

import pytest
import pytest_asyncio

from chat_session.domain import ConversationSession
from chat_session.interfaces import ReplyProvider, Transcriber


async def settle(rounds: int = 20) -> None:
    """Yields to the event loop until spawned tasks have made progress."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ControlledReplyProvider(ReplyProvider):
    """Reply provider whose calls complete only when the test says so."""

    def __init__(self):
        self.prompts: list[str] = []
        self._futures: list[asyncio.Future] = []

    async def generate_reply(self, prompt_context: str) -> str:
        future = asyncio.get_running_loop().create_future()
        self.prompts.append(prompt_context)
        self._futures.append(future)
        return await future

    def complete(self, index: int, text: str) -> None:
        self._futures[index].set_result(text)

    def fail(self, index: int, exc: Exception) -> None:
        self._futures[index].set_exception(exc)


class EchoReplyProvider(ReplyProvider):
    """Replies immediately, echoing the prompt."""

    def __init__(self):
        self.prompts: list[str] = []

    async def generate_reply(self, prompt_context: str) -> str:
        self.prompts.append(prompt_context)
        return f"echo: {prompt_context}"


class ControlledTranscriber(Transcriber):
    """Transcriber whose calls complete only when the test says so."""

    def __init__(self):
        self.references: list[str] = []
        self._futures: dict[str, asyncio.Future] = {}

    async def transcribe(self, audio_reference: str) -> str:
        future = asyncio.get_running_loop().create_future()
        self.references.append(audio_reference)
        self._futures[audio_reference] = future
        return await future

    def complete(self, audio_reference: str, transcript: str) -> None:
        self._futures[audio_reference].set_result(transcript)

    def fail(self, audio_reference: str, exc: Exception) -> None:
        self._futures[audio_reference].set_exception(exc)


class SilentTranscriber(Transcriber):
    """Transcriber that never answers."""

    def __init__(self):
        self.references: list[str] = []

    async def transcribe(self, audio_reference: str) -> str:
        self.references.append(audio_reference)
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


@pytest.fixture
def reply_provider():
    return ControlledReplyProvider()


@pytest.fixture
def transcriber():
    return ControlledTranscriber()


@pytest_asyncio.fixture
async def session(reply_provider, transcriber):
    """A session wired to controlled collaborators, closed after the test."""
    session = ConversationSession(
        reply_provider,
        transcriber,
        conversation_id="conv-1",
        reply_timeout_seconds=5.0,
        transcription_timeout_seconds=5.0,
    )
    yield session
    session.close()
    await session.wait_for_pending()


@pytest_asyncio.fixture
async def echo_session():
    """A session whose replies arrive immediately."""
    session = ConversationSession(
        EchoReplyProvider(),
        SilentTranscriber(),
        conversation_id="conv-echo",
        transcription_timeout_seconds=5.0,
    )
    yield session
    session.close()
    await session.wait_for_pending()
