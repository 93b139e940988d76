"""Abstract interface for assistant reply generation."""

from abc import ABC, abstractmethod


class ReplyProvider(ABC):
    """Abstract base class for assistant reply backends."""

    @abstractmethod
    async def generate_reply(self, prompt_context: str) -> str:
        """
        Produces the assistant's reply to a user-originating event.

        Args:
            prompt_context: The user's text, or a marker such as "[voice]" or
                "[file] <name>" for non-text events.

        Returns:
            The reply text.

        Raises:
            ReplyProviderError: If the backend cannot produce a reply.
        """
        pass
