"""Conversation session: the ordered message log and its asynchronous reply contract."""

import asyncio
import uuid
from collections.abc import Callable, Coroutine, Iterable
from typing import Any, Literal

from chat_session.exceptions import (
    CaptureInProgressError,
    MessageNotFoundError,
    PermissionDeniedError,
    PlaceholderMismatchError,
    SessionClosedError,
    TranscriptionError,
)
from chat_session.interfaces import ReplyProvider, Transcriber
from chat_session.logging import setup_logging

from .models import CaptureState, EventType, Message, MessageKind, SessionEvent

logger = setup_logging(__name__)

VOICE_PROMPT = "[voice]"
FILE_PROMPT_PREFIX = "[file] "
FILE_MESSAGE_PREFIX = "Uploaded file: "
REPLY_FAILED_TEXT = "Sorry, I couldn't get a response. Please try again."
TRANSCRIPTION_FAILED_TEXT = "Couldn't transcribe the voice message."

ReplyOrdering = Literal["request", "completion"]
SessionListener = Callable[[SessionEvent], None]


class ConversationSession:
    """
    Owns one conversation's message log.

    All mutations happen on the event loop that first drives the session.
    Reply generation and transcription run as tasks on that loop and apply
    their results through the session, so the log has exactly one writer.

    Replies are committed in request order by default: a reply that completes
    early waits until every earlier request has committed. With
    ``reply_ordering="completion"`` each reply is appended as soon as it
    arrives. Either way a user-originating event yields exactly one reply
    entry: the assistant's text, or a system notice if the provider failed
    or timed out.

    ``reset()`` and ``close()`` start a new generation; completions belonging
    to an older generation are dropped.
    """

    def __init__(
        self,
        reply_provider: ReplyProvider,
        transcriber: Transcriber,
        *,
        conversation_id: str | None = None,
        reply_timeout_seconds: float = 5.0,
        transcription_timeout_seconds: float = 30.0,
        reply_ordering: ReplyOrdering = "request",
        initial_messages: Iterable[Message] = (),
    ):
        if reply_ordering not in ("request", "completion"):
            raise ValueError(f"Unknown reply ordering: {reply_ordering!r}")

        self.conversation_id = conversation_id or str(uuid.uuid4())
        self._reply_provider = reply_provider
        self._transcriber = transcriber
        self._reply_timeout = reply_timeout_seconds
        self._transcription_timeout = transcription_timeout_seconds
        self._reply_ordering = reply_ordering

        self._messages: list[Message] = list(initial_messages)
        self._placeholder_id: str | None = None
        self._listeners: list[SessionListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._generation = 0
        self._closed = False

        self._next_reply_seq = 0
        self._next_commit_seq = 0
        self._ready_replies: dict[int, Message] = {}

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[Message, ...]:
        """The log as it stands between mutations."""
        return tuple(self._messages)

    @property
    def capture_state(self) -> CaptureState:
        return CaptureState.CAPTURING if self._placeholder_id is not None else CaptureState.IDLE

    @property
    def active_placeholder_id(self) -> str | None:
        """Id of the "Listening…" placeholder while a capture is active."""
        return self._placeholder_id

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        """Number of reply/transcription tasks still in flight."""
        return len(self._tasks)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Registers a mutation listener and returns a function that removes it.

        Raises:
            SessionClosedError: If the session is closed; it emits no further events.
        """
        self._ensure_open()
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # User-originating operations
    # ------------------------------------------------------------------

    def append_user_text(self, text: str) -> str | None:
        """
        Appends a user text message and requests a reply to it.

        Whitespace-only input is ignored.

        Returns:
            The new message id, or None when nothing was appended.
        """
        self._ensure_open()
        trimmed = text.strip()
        if not trimmed:
            logger.debug(
                "Ignoring blank user text", extra={"conversation_id": self.conversation_id}
            )
            return None

        self._bind_loop()
        message = Message.user_text(trimmed)
        self._append(message)
        self.request_reply(trimmed)
        return message.id

    def begin_voice_capture(self, permission_granted: bool = True) -> str:
        """
        Starts voice capture by appending the "Listening…" placeholder.

        Args:
            permission_granted: Outcome of the microphone permission prompt.

        Returns:
            The placeholder's message id.

        Raises:
            CaptureInProgressError: If a capture is already active.
            PermissionDeniedError: If microphone access was denied.
        """
        self._ensure_open()
        if self._placeholder_id is not None:
            raise CaptureInProgressError(self._placeholder_id)
        if not permission_granted:
            logger.warning(
                "Microphone permission denied, capture not started",
                extra={"conversation_id": self.conversation_id},
            )
            raise PermissionDeniedError("microphone")

        placeholder = Message.listening_placeholder()
        self._placeholder_id = placeholder.id
        self._append(placeholder)
        logger.info(
            "Voice capture started",
            extra={"conversation_id": self.conversation_id, "placeholder_id": placeholder.id},
        )
        return placeholder.id

    def complete_voice_capture(self, placeholder_id: str, audio_reference: str) -> str:
        """
        Substitutes the capture placeholder with the finalized voice message.

        The voice message takes the placeholder's position, a reply is
        requested and transcription is scheduled alongside it.

        Returns:
            The voice message id.

        Raises:
            MessageNotFoundError: If the placeholder is no longer in the log.
                The caller should fall back to ``append_voice_message``.
            PlaceholderMismatchError: If a different capture is active.
        """
        self._ensure_open()
        self._bind_loop()
        if self._placeholder_id is not None and placeholder_id != self._placeholder_id:
            logger.warning(
                "Completion does not match the active capture",
                extra={
                    "conversation_id": self.conversation_id,
                    "placeholder_id": placeholder_id,
                    "active_placeholder_id": self._placeholder_id,
                },
            )
            raise PlaceholderMismatchError(placeholder_id, self._placeholder_id)
        if placeholder_id == self._placeholder_id:
            self._placeholder_id = None

        index = self._index_of(placeholder_id)
        if index is None or not self._messages[index].is_placeholder:
            logger.warning(
                "Capture placeholder missing on completion",
                extra={
                    "conversation_id": self.conversation_id,
                    "placeholder_id": placeholder_id,
                    "audio_reference": audio_reference,
                },
            )
            raise MessageNotFoundError(placeholder_id)

        voice = Message.voice(audio_reference)
        self._messages[index] = voice
        self._notify(EventType.REPLACED, index, voice)
        logger.info(
            "Voice capture completed",
            extra={
                "conversation_id": self.conversation_id,
                "message_id": voice.id,
                "audio_reference": audio_reference,
            },
        )

        self.request_reply(VOICE_PROMPT)
        self.request_transcription(audio_reference)
        return voice.id

    def append_voice_message(self, audio_reference: str) -> str:
        """Appends a voice message without a placeholder, e.g. after a reset raced a capture."""
        self._ensure_open()
        self._bind_loop()
        voice = Message.voice(audio_reference)
        self._append(voice)
        self.request_reply(VOICE_PROMPT)
        self.request_transcription(audio_reference)
        return voice.id

    def cancel_voice_capture(self) -> bool:
        """
        Abandons the active capture and removes its placeholder.

        Returns:
            False if no capture was active.
        """
        self._ensure_open()
        if self._placeholder_id is None:
            return False

        placeholder_id, self._placeholder_id = self._placeholder_id, None
        index = self._index_of(placeholder_id)
        if index is not None:
            removed = self._messages.pop(index)
            self._notify(EventType.REMOVED, index, removed)
        logger.info(
            "Voice capture cancelled",
            extra={"conversation_id": self.conversation_id, "placeholder_id": placeholder_id},
        )
        return True

    def append_file_reference(self, filename: str) -> str:
        """Appends a message naming an uploaded file and requests a reply to it."""
        self._ensure_open()
        self._bind_loop()
        message = Message.user_text(f"{FILE_MESSAGE_PREFIX}{filename}")
        self._append(message)
        self.request_reply(f"{FILE_PROMPT_PREFIX}{filename}")
        return message.id

    def resolve_transcript(self, audio_reference: str, transcript: str) -> bool:
        """
        Sets the transcript of the most recent matching voice message.

        Only voice messages whose transcript is still absent are considered,
        so repeated calls for the same reference change nothing.

        Returns:
            True if a message was updated; False if none matched or the
            session is closed.
        """
        if self._closed:
            logger.info(
                "Dropping transcript for closed conversation",
                extra={"conversation_id": self.conversation_id, "audio_reference": audio_reference},
            )
            return False

        for index in range(len(self._messages) - 1, -1, -1):
            message = self._messages[index]
            if (
                message.kind is MessageKind.VOICE
                and message.audio_reference == audio_reference
                and message.transcript is None
            ):
                updated = message.with_transcript(transcript)
                self._messages[index] = updated
                self._notify(EventType.UPDATED, index, updated)
                logger.info(
                    "Transcript resolved",
                    extra={"conversation_id": self.conversation_id, "message_id": updated.id},
                )
                return True

        logger.warning(
            "No voice message awaiting transcript",
            extra={"conversation_id": self.conversation_id, "audio_reference": audio_reference},
        )
        return False

    # ------------------------------------------------------------------
    # Asynchronous collaborators
    # ------------------------------------------------------------------

    def request_reply(self, prompt_context: str) -> asyncio.Task:
        """Asks the reply provider for a reply; the result is committed to the log later."""
        self._ensure_open()
        self._bind_loop()
        seq = self._next_reply_seq
        self._next_reply_seq += 1
        return self._spawn(
            self._run_reply(prompt_context, seq, self._generation),
            name=f"reply-{self.conversation_id}-{seq}",
        )

    def request_transcription(self, audio_reference: str) -> asyncio.Task:
        """Asks the transcriber for a transcript of ``audio_reference``."""
        self._ensure_open()
        self._bind_loop()
        return self._spawn(
            self._run_transcription(audio_reference, self._generation),
            name=f"transcribe-{self.conversation_id}-{audio_reference}",
        )

    async def _run_reply(self, prompt_context: str, seq: int, generation: int) -> None:
        try:
            content = await asyncio.wait_for(
                self._reply_provider.generate_reply(prompt_context),
                timeout=self._reply_timeout,
            )
            message = Message.assistant_text(content)
        except TimeoutError:
            logger.warning(
                "Reply provider timed out",
                extra={"conversation_id": self.conversation_id, "timeout": self._reply_timeout},
            )
            message = Message.system_notice(REPLY_FAILED_TEXT)
        except Exception:
            logger.exception(
                "Reply provider failed", extra={"conversation_id": self.conversation_id}
            )
            message = Message.system_notice(REPLY_FAILED_TEXT)

        if generation != self._generation:
            logger.info(
                "Dropping reply from a previous generation",
                extra={"conversation_id": self.conversation_id},
            )
            return
        self._commit_reply(seq, message)

    async def _run_transcription(self, audio_reference: str, generation: int) -> None:
        transcript: str | None = None
        try:
            transcript = await asyncio.wait_for(
                self._transcriber.transcribe(audio_reference),
                timeout=self._transcription_timeout,
            )
        except TimeoutError:
            logger.warning(
                "Transcriber timed out",
                extra={
                    "conversation_id": self.conversation_id,
                    "audio_reference": audio_reference,
                    "timeout": self._transcription_timeout,
                },
            )
        except TranscriptionError as e:
            logger.warning(
                "Transcription failed",
                extra={
                    "conversation_id": self.conversation_id,
                    "audio_reference": audio_reference,
                    "error": str(e),
                },
            )
        except Exception:
            logger.exception(
                "Transcriber raised unexpectedly",
                extra={"conversation_id": self.conversation_id, "audio_reference": audio_reference},
            )

        if generation != self._generation:
            logger.info(
                "Dropping transcript from a previous generation",
                extra={"conversation_id": self.conversation_id, "audio_reference": audio_reference},
            )
            return
        if transcript is None:
            self._append(Message.system_notice(TRANSCRIPTION_FAILED_TEXT))
            return
        self.resolve_transcript(audio_reference, transcript)

    def _commit_reply(self, seq: int, message: Message) -> None:
        if self._reply_ordering == "completion":
            self._append(message)
            return

        self._ready_replies[seq] = message
        while self._next_commit_seq in self._ready_replies:
            self._append(self._ready_replies.pop(self._next_commit_seq))
            self._next_commit_seq += 1

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Clears the log and abandons in-flight work; the session stays usable."""
        self._ensure_open()
        self._generation += 1
        self._cancel_tasks()
        self._messages.clear()
        self._placeholder_id = None
        self._ready_replies.clear()
        self._next_reply_seq = 0
        self._next_commit_seq = 0
        self._notify(EventType.RESET, None, None)
        logger.info("Conversation reset", extra={"conversation_id": self.conversation_id})

    def close(self) -> None:
        """Tears the session down. Late completions are ignored."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._cancel_tasks()
        self._listeners.clear()
        logger.info("Conversation closed", extra={"conversation_id": self.conversation_id})

    async def wait_for_pending(self) -> None:
        """Waits until no reply or transcription task is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(self.conversation_id)

    def _bind_loop(self) -> None:
        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise RuntimeError(
                f"Conversation '{self.conversation_id}' is owned by a different event loop"
            )

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_tasks(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    def _index_of(self, message_id: str) -> int | None:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                return index
        return None

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        self._notify(EventType.APPENDED, len(self._messages) - 1, message)

    def _notify(self, event_type: EventType, index: int | None, message: Message | None) -> None:
        if not self._listeners:
            return
        event = SessionEvent(type=event_type, index=index, message=message)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Session listener failed",
                    extra={"conversation_id": self.conversation_id, "event": event_type.value},
                )
