from chat_session.domain import (
    CaptureState,
    ConversationRegistry,
    ConversationSession,
    EventType,
    Message,
    MessageKind,
    Sender,
    SessionEvent,
)
from chat_session.exceptions import (
    CaptureInProgressError,
    ConversationNotFoundError,
    MessageNotFoundError,
    PermissionDeniedError,
    PlaceholderMismatchError,
    ReplyProviderError,
    SessionClosedError,
    TranscriptionError,
)
from chat_session.interfaces import ReplyProvider, Transcriber
from chat_session.logging import setup_logging

__all__ = [
    "setup_logging",
    "CaptureState",
    "ConversationRegistry",
    "ConversationSession",
    "EventType",
    "Message",
    "MessageKind",
    "Sender",
    "SessionEvent",
    "ReplyProvider",
    "Transcriber",
    "CaptureInProgressError",
    "ConversationNotFoundError",
    "MessageNotFoundError",
    "PermissionDeniedError",
    "PlaceholderMismatchError",
    "ReplyProviderError",
    "SessionClosedError",
    "TranscriptionError",
]
