"""Domain layer exports."""

from .models import (
    CaptureState,
    EventType,
    Message,
    MessageKind,
    Sender,
    SessionEvent,
)
from .registry import ConversationRegistry
from .session import ConversationSession

__all__ = [
    "CaptureState",
    "ConversationRegistry",
    "ConversationSession",
    "EventType",
    "Message",
    "MessageKind",
    "Sender",
    "SessionEvent",
]
