"""Tests for chat_session.domain.models."""

import pytest
from pydantic import ValidationError

from chat_session.domain import EventType, Message, MessageKind, Sender, SessionEvent
from chat_session.domain.models import GREETING_TEXT, LISTENING_TEXT


class TestMessageValidation:
    def test_voice_requires_audio_reference(self):
        with pytest.raises(ValidationError, match="audio_reference"):
            Message(sender=Sender.USER, kind=MessageKind.VOICE)

    def test_text_message_cannot_carry_audio(self):
        with pytest.raises(ValidationError, match="cannot carry audio"):
            Message(
                sender=Sender.USER,
                kind=MessageKind.TEXT,
                text="hi",
                audio_reference="ref-1",
            )

    def test_text_message_requires_text(self):
        with pytest.raises(ValidationError, match="require text"):
            Message(sender=Sender.ASSISTANT, kind=MessageKind.TEXT)

    def test_image_card_needs_no_text(self):
        card = Message.image_card()

        assert card.sender is Sender.ASSISTANT
        assert card.kind is MessageKind.IMAGE_CARD
        assert card.text is None

    def test_messages_are_immutable(self):
        message = Message.user_text("hi")

        with pytest.raises(ValidationError):
            message.text = "changed"

    def test_ids_are_assigned_and_distinct(self):
        first = Message.user_text("a")
        second = Message.user_text("a")

        assert first.id
        assert first.id != second.id


class TestFactories:
    def test_listening_placeholder(self):
        placeholder = Message.listening_placeholder()

        assert placeholder.sender is Sender.USER
        assert placeholder.kind is MessageKind.TEXT
        assert placeholder.text == LISTENING_TEXT
        assert placeholder.is_placeholder

    def test_voice_starts_without_transcript(self):
        voice = Message.voice("ref-1")

        assert voice.kind is MessageKind.VOICE
        assert voice.audio_reference == "ref-1"
        assert voice.transcript is None
        assert voice.text is None

    def test_greeting(self):
        greeting = Message.greeting()

        assert greeting.sender is Sender.ASSISTANT
        assert greeting.text == GREETING_TEXT


class TestWithTranscript:
    def test_sets_transcript_and_text_keeping_identity(self):
        voice = Message.voice("ref-1")

        updated = voice.with_transcript("hello")

        assert updated.id == voice.id
        assert updated.created_at == voice.created_at
        assert updated.transcript == "hello"
        assert updated.text == "hello"
        assert voice.transcript is None

    def test_transcript_set_only_once(self):
        updated = Message.voice("ref-1").with_transcript("hello")

        with pytest.raises(ValueError, match="already set"):
            updated.with_transcript("again")

    def test_only_voice_messages(self):
        with pytest.raises(ValueError, match="only voice"):
            Message.user_text("hi").with_transcript("hello")


def test_serialization_uses_wire_values():
    dumped = Message.image_card().model_dump(mode="json")

    assert dumped["kind"] == "image-card"
    assert dumped["sender"] == "assistant"


def test_session_event_carries_message():
    message = Message.user_text("hi")

    event = SessionEvent(type=EventType.APPENDED, index=0, message=message)

    assert event.message == message
    assert event.type.value == "appended"
