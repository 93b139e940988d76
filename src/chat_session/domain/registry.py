"""In-memory registry of live conversation sessions."""

import uuid
from collections.abc import Callable, Iterable

from chat_session.exceptions import ConversationNotFoundError
from chat_session.logging import setup_logging

from .models import Message
from .session import ConversationSession

logger = setup_logging(__name__)

SessionFactory = Callable[..., ConversationSession]


class ConversationRegistry:
    """Keeps one ConversationSession per open conversation; nothing is persisted."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory
        self._sessions: dict[str, ConversationSession] = {}

    def create(self, initial_messages: Iterable[Message] = ()) -> ConversationSession:
        conversation_id = str(uuid.uuid4())
        session = self._session_factory(
            conversation_id=conversation_id,
            initial_messages=initial_messages,
        )
        self._sessions[conversation_id] = session
        logger.info("Conversation created", extra={"conversation_id": conversation_id})
        return session

    def get(self, conversation_id: str) -> ConversationSession:
        session = self._sessions.get(conversation_id)
        if session is None:
            raise ConversationNotFoundError(conversation_id)
        return session

    def close(self, conversation_id: str) -> None:
        session = self._sessions.pop(conversation_id, None)
        if session is None:
            raise ConversationNotFoundError(conversation_id)
        session.close()

    async def close_all(self) -> None:
        """Closes every session and waits for their cancelled work to settle."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            session.close()
        for session in sessions:
            await session.wait_for_pending()
        logger.info("All conversations closed", extra={"count": len(sessions)})

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
