"""Request and response models for the conversation API."""

from pydantic import BaseModel, Field

from chat_session.domain import CaptureState, Message


class CreateConversationRequest(BaseModel):
    """Options for a new conversation."""

    seed_greeting: bool | None = None


class SendMessageRequest(BaseModel):
    """Text composed by the user."""

    text: str = Field(max_length=10_000)


class BeginVoiceCaptureRequest(BaseModel):
    """Outcome of the client's microphone permission prompt."""

    permission_granted: bool = True


class ConversationResponse(BaseModel):
    """Snapshot of a conversation's log."""

    conversation_id: str
    capture_state: CaptureState
    messages: list[Message]


class MessageAcceptedResponse(BaseModel):
    """Id of the appended user message; None when the input was ignored."""

    message_id: str | None


class VoiceCaptureResponse(BaseModel):
    """Placeholder created for an active voice capture."""

    placeholder_id: str


class VoiceMessageResponse(BaseModel):
    """Result of finalizing a voice capture."""

    message_id: str
    audio_reference: str
    substituted: bool


class FileReferenceResponse(BaseModel):
    """Result of attaching a file to the conversation."""

    message_id: str
    object_name: str
