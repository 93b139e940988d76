"""Canned-reply provider used until a real backend is configured."""

import asyncio
import random
from collections.abc import Sequence

from chat_session.interfaces import ReplyProvider
from chat_session.logging import setup_logging

logger = setup_logging(__name__)

FALLBACK_REPLIES = (
    "Here's a random response while the API is being wired up.",
    "Working on it... Here's a placeholder answer.",
    "This is a simulated reply. The real API response will appear here.",
    "Got it! Responding with a temporary message.",
    "Thanks for your message, here's a random placeholder.",
    "I'm a stub right now. Real answers coming soon.",
    "Placeholder reply: your request has been received.",
    "Simulated: I understand. Here's something for now.",
    "Here's a random message, API integration pending.",
    "Acknowledged. Returning a mock response.",
)
DEFAULT_REPLY = "Okay."


class SimulatedReplyProvider(ReplyProvider):
    """Answers with a random canned reply after a random delay."""

    def __init__(
        self,
        min_delay_seconds: float = 0.6,
        max_delay_seconds: float = 1.4,
        replies: Sequence[str] = FALLBACK_REPLIES,
        rng: random.Random | None = None,
    ):
        if min_delay_seconds < 0 or max_delay_seconds < min_delay_seconds:
            raise ValueError(
                f"Invalid delay range: [{min_delay_seconds}, {max_delay_seconds}]"
            )
        self._min_delay = min_delay_seconds
        self._max_delay = max_delay_seconds
        self._replies = tuple(replies)
        self._rng = rng or random.Random()

    async def generate_reply(self, prompt_context: str) -> str:
        delay = self._rng.uniform(self._min_delay, self._max_delay)
        reply = self._rng.choice(self._replies) if self._replies else DEFAULT_REPLY
        await asyncio.sleep(delay)
        logger.info(
            "Simulated reply generated",
            extra={"delay_seconds": round(delay, 3), "prompt_length": len(prompt_context)},
        )
        return reply
