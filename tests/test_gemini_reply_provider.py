"""Tests for chat_session.infrastructure.gemini_reply_provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from chat_session.exceptions import ReplyProviderError
from chat_session.infrastructure import GeminiReplyProvider


def make_client(text=None, side_effect=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text=text), side_effect=side_effect
    )
    return client


class TestGeminiReplyProvider:
    @pytest.mark.asyncio
    async def test_returns_response_text(self):
        client = make_client(text="x = 3")
        provider = GeminiReplyProvider(client, "gemini-test", "Be a tutor.")

        reply = await provider.generate_reply("Solve 3x + 5 = 14")

        assert reply == "x = 3"
        client.aio.models.generate_content.assert_awaited_once_with(
            model="gemini-test",
            contents="Solve 3x + 5 = 14",
            config={"system_instruction": "Be a tutor."},
        )

    @pytest.mark.asyncio
    async def test_api_failure_wrapped_with_cause(self):
        boom = ConnectionError("unreachable")
        provider = GeminiReplyProvider(make_client(side_effect=boom), "m", "p")

        with pytest.raises(ReplyProviderError) as exc_info:
            await provider.generate_reply("hi")

        assert exc_info.value.cause is boom
        assert exc_info.value.__cause__ is boom

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, ""])
    async def test_empty_response_rejected(self, text):
        provider = GeminiReplyProvider(make_client(text=text), "m", "p")

        with pytest.raises(ReplyProviderError, match="empty response"):
            await provider.generate_reply("hi")
