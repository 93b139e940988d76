"""Domain models for the conversation message log."""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

LISTENING_TEXT = "Listening…"
GREETING_TEXT = "Hello there! How may I assist you today?"


class Sender(str, Enum):
    """Who authored a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageKind(str, Enum):
    """How a message is rendered."""

    TEXT = "text"
    IMAGE_CARD = "image-card"
    VOICE = "voice"


class CaptureState(str, Enum):
    """Voice capture state of a session."""

    IDLE = "idle"
    CAPTURING = "capturing"


class EventType(str, Enum):
    """Kinds of log mutation reported to session listeners."""

    APPENDED = "appended"
    REPLACED = "replaced"
    UPDATED = "updated"
    REMOVED = "removed"
    RESET = "reset"


def _new_message_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Message(BaseModel, frozen=True):
    """A single entry of the conversation log."""

    id: str = Field(default_factory=_new_message_id)
    sender: Sender
    kind: MessageKind
    text: str | None = None
    audio_reference: str | None = None
    transcript: str | None = None
    is_placeholder: bool = False
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "Message":
        if self.kind is MessageKind.VOICE:
            if not self.audio_reference:
                raise ValueError("voice messages require an audio_reference")
            return self
        if self.audio_reference is not None or self.transcript is not None:
            raise ValueError(f"{self.kind.value} messages cannot carry audio or transcript")
        if self.kind is MessageKind.TEXT and self.text is None:
            raise ValueError("text messages require text")
        return self

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(sender=Sender.USER, kind=MessageKind.TEXT, text=text)

    @classmethod
    def assistant_text(cls, text: str) -> "Message":
        return cls(sender=Sender.ASSISTANT, kind=MessageKind.TEXT, text=text)

    @classmethod
    def system_notice(cls, text: str) -> "Message":
        return cls(sender=Sender.SYSTEM, kind=MessageKind.TEXT, text=text)

    @classmethod
    def voice(cls, audio_reference: str) -> "Message":
        return cls(sender=Sender.USER, kind=MessageKind.VOICE, audio_reference=audio_reference)

    @classmethod
    def listening_placeholder(cls) -> "Message":
        return cls(
            sender=Sender.USER,
            kind=MessageKind.TEXT,
            text=LISTENING_TEXT,
            is_placeholder=True,
        )

    @classmethod
    def image_card(cls, sender: Sender = Sender.ASSISTANT) -> "Message":
        return cls(sender=sender, kind=MessageKind.IMAGE_CARD)

    @classmethod
    def greeting(cls) -> "Message":
        return cls.assistant_text(GREETING_TEXT)

    def with_transcript(self, transcript: str) -> "Message":
        """Returns a copy with the transcript set; text mirrors the transcript."""
        if self.kind is not MessageKind.VOICE:
            raise ValueError("only voice messages carry a transcript")
        if self.transcript is not None:
            raise ValueError(f"transcript of message '{self.id}' is already set")
        return self.model_copy(update={"transcript": transcript, "text": transcript})


class SessionEvent(BaseModel, frozen=True):
    """A log mutation, delivered to session listeners after it is applied."""

    type: EventType
    index: int | None = None
    message: Message | None = None
