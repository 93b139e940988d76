"""Conversation endpoints driving a ConversationSession.

Handlers are coroutines so every session mutation runs on the event loop
that owns the session. Blocking storage calls go through a worker thread.
"""

import asyncio
import os
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from chat_session.config import AppConfig
from chat_session.dependencies import get_config, get_registry, get_storage
from chat_session.domain import ConversationRegistry, ConversationSession, Message
from chat_session.exceptions import (
    CaptureInProgressError,
    ConversationNotFoundError,
    MessageNotFoundError,
    PermissionDeniedError,
    PlaceholderMismatchError,
    SessionClosedError,
    StorageUploadError,
)
from chat_session.interfaces import StorageClient
from chat_session.logging import setup_logging
from chat_session.response_models import (
    BeginVoiceCaptureRequest,
    ConversationResponse,
    CreateConversationRequest,
    FileReferenceResponse,
    MessageAcceptedResponse,
    SendMessageRequest,
    VoiceCaptureResponse,
    VoiceMessageResponse,
)

logger = setup_logging(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])

DEFAULT_AUDIO_EXTENSION = ".m4a"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

RegistryDep = Annotated[ConversationRegistry, Depends(get_registry)]
StorageDep = Annotated[StorageClient, Depends(get_storage)]
ConfigDep = Annotated[AppConfig, Depends(get_config)]


async def _get_session(conversation_id: str, registry: RegistryDep) -> ConversationSession:
    """Dependency resolving the conversation in the path."""
    try:
        return registry.get(conversation_id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")


SessionDep = Annotated[ConversationSession, Depends(_get_session)]


def _snapshot(session: ConversationSession) -> ConversationResponse:
    return ConversationResponse(
        conversation_id=session.conversation_id,
        capture_state=session.capture_state,
        messages=list(session.messages),
    )


async def _store_upload(
    storage: StorageClient, object_name: str, upload: UploadFile
) -> None:
    try:
        await asyncio.to_thread(
            storage.upload,
            object_name,
            upload.file,
            upload.size,
            upload.content_type or DEFAULT_CONTENT_TYPE,
        )
    except StorageUploadError:
        raise HTTPException(status_code=500, detail="File upload failed")


def _log_orphaned_object(conversation_id: str, object_name: str, reason: str) -> None:
    logger.warning(
        "Stored object has no message referencing it",
        extra={"conversation_id": conversation_id, "object_name": object_name, "reason": reason},
    )


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    registry: RegistryDep,
    config: ConfigDep,
    request: CreateConversationRequest | None = None,
) -> ConversationResponse:
    """Opens a new conversation, optionally starting with the assistant's greeting."""
    seed_greeting = config.session.seed_greeting
    if request is not None and request.seed_greeting is not None:
        seed_greeting = request.seed_greeting

    initial_messages = [Message.greeting()] if seed_greeting else []
    session = registry.create(initial_messages=initial_messages)
    return _snapshot(session)


@router.get("/{conversation_id}/messages", response_model=ConversationResponse)
async def get_messages(session: SessionDep) -> ConversationResponse:
    """Returns the ordered message log."""
    return _snapshot(session)


@router.post("/{conversation_id}/messages", response_model=MessageAcceptedResponse)
async def send_message(
    request: SendMessageRequest, session: SessionDep
) -> MessageAcceptedResponse:
    """Appends the user's text; the assistant reply follows asynchronously."""
    return MessageAcceptedResponse(message_id=session.append_user_text(request.text))


@router.post(
    "/{conversation_id}/voice",
    response_model=VoiceCaptureResponse,
    status_code=status.HTTP_201_CREATED,
)
async def begin_voice_capture(
    session: SessionDep, request: BeginVoiceCaptureRequest | None = None
) -> VoiceCaptureResponse:
    """Starts voice capture and returns the placeholder to substitute later."""
    permission_granted = request.permission_granted if request is not None else True
    try:
        placeholder_id = session.begin_voice_capture(permission_granted=permission_granted)
    except PermissionDeniedError:
        raise HTTPException(status_code=403, detail="Microphone permission denied")
    except CaptureInProgressError:
        raise HTTPException(status_code=409, detail="Voice capture already in progress")
    return VoiceCaptureResponse(placeholder_id=placeholder_id)


@router.post(
    "/{conversation_id}/voice/{placeholder_id}/audio",
    response_model=VoiceMessageResponse,
)
async def complete_voice_capture(
    conversation_id: str,
    placeholder_id: str,
    audio: UploadFile,
    session: SessionDep,
    storage: StorageDep,
) -> VoiceMessageResponse:
    """
    Stores the recording and finalizes the capture.

    If the placeholder vanished meanwhile (e.g. the conversation was reset),
    the recording is appended as a new voice message instead of dropped.
    """
    active_placeholder_id = session.active_placeholder_id
    if active_placeholder_id is not None and active_placeholder_id != placeholder_id:
        raise HTTPException(status_code=409, detail="Placeholder is not the active voice capture")

    extension = os.path.splitext(audio.filename or "")[1] or DEFAULT_AUDIO_EXTENSION
    audio_reference = f"{conversation_id}/voice/{uuid.uuid4()}{extension}"

    logger.info(
        "Received voice recording",
        extra={
            "conversation_id": conversation_id,
            "placeholder_id": placeholder_id,
            "audio_reference": audio_reference,
        },
    )
    await _store_upload(storage, audio_reference, audio)

    try:
        message_id = session.complete_voice_capture(placeholder_id, audio_reference)
        substituted = True
    except MessageNotFoundError:
        message_id = session.append_voice_message(audio_reference)
        substituted = False
    except PlaceholderMismatchError:
        _log_orphaned_object(conversation_id, audio_reference, "placeholder mismatch")
        raise HTTPException(status_code=409, detail="Placeholder is not the active voice capture")
    except SessionClosedError:
        _log_orphaned_object(conversation_id, audio_reference, "conversation closed")
        raise HTTPException(status_code=404, detail="Conversation not found")

    return VoiceMessageResponse(
        message_id=message_id,
        audio_reference=audio_reference,
        substituted=substituted,
    )


@router.delete("/{conversation_id}/voice", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_voice_capture(session: SessionDep) -> None:
    """Discards the active capture placeholder."""
    if not session.cancel_voice_capture():
        raise HTTPException(status_code=409, detail="No voice capture in progress")


@router.post(
    "/{conversation_id}/files",
    response_model=FileReferenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_file(
    conversation_id: str,
    file: UploadFile,
    session: SessionDep,
    storage: StorageDep,
) -> FileReferenceResponse:
    """Stores an attachment and adds a message naming it."""
    filename = os.path.basename(file.filename or "") or "attachment"
    object_name = f"{conversation_id}/files/{uuid.uuid4()}/{filename}"

    logger.info(
        "Received file upload",
        extra={"conversation_id": conversation_id, "object_name": object_name},
    )
    await _store_upload(storage, object_name, file)

    try:
        message_id = session.append_file_reference(filename)
    except SessionClosedError:
        _log_orphaned_object(conversation_id, object_name, "conversation closed")
        raise HTTPException(status_code=404, detail="Conversation not found")
    return FileReferenceResponse(message_id=message_id, object_name=object_name)


@router.post("/{conversation_id}/reset", response_model=ConversationResponse)
async def reset_conversation(session: SessionDep) -> ConversationResponse:
    """Clears the log; replies still in flight are discarded."""
    session.reset()
    return _snapshot(session)


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_conversation(conversation_id: str, registry: RegistryDep) -> None:
    """Closes the conversation and forgets it."""
    try:
        registry.close(conversation_id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
