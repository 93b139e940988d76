"""Gemini implementation of the ReplyProvider interface."""

from google import genai

from chat_session.exceptions import ReplyProviderError
from chat_session.interfaces import ReplyProvider
from chat_session.logging import setup_logging

logger = setup_logging(__name__)


class GeminiReplyProvider(ReplyProvider):
    """Reply provider backed by Google Gemini."""

    def __init__(self, client: genai.Client, model_name: str, system_prompt: str):
        self._client = client
        self._model_name = model_name
        self._system_prompt = system_prompt

    async def generate_reply(self, prompt_context: str) -> str:
        """
        Generates the assistant's reply with Gemini.

        Args:
            prompt_context: The user's text or an event marker.

        Returns:
            The reply text.

        Raises:
            ReplyProviderError: If the API call fails or returns no text.
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=prompt_context,
                config={"system_instruction": self._system_prompt},
            )
        except Exception as e:
            logger.exception("Gemini API call failed", extra={"model": self._model_name})
            raise ReplyProviderError(f"Gemini reply failed: {e}", cause=e) from e

        if not response.text:
            logger.error("Gemini returned empty response", extra={"model": self._model_name})
            raise ReplyProviderError("Gemini returned empty response")

        logger.info("Gemini reply generated", extra={"model": self._model_name})
        return response.text
