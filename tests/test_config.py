"""Tests for chat_session.config."""

import pytest
from pydantic import ValidationError

from chat_session.config import SessionConfig, load_config

ENV_VARS = [
    "GEMINI_API_KEY",
    "REPLY_PROVIDER",
    "REPLY_ORDERING",
    "REPLY_TIMEOUT_SECONDS",
    "TRANSCRIPTION_TIMEOUT_SECONDS",
    "SEED_GREETING",
    "MINIO_BUCKET_NAME",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()

    assert config.session.reply_timeout_seconds == 5.0
    assert config.session.transcription_timeout_seconds == 30.0
    assert config.session.reply_ordering == "request"
    assert config.session.seed_greeting is False
    assert config.reply.provider == "simulated"
    assert (config.reply.min_delay_seconds, config.reply.max_delay_seconds) == (0.6, 1.4)
    assert config.minio.bucket_name == "conversations"


def test_gemini_selected_when_key_present(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    assert load_config().reply.provider == "gemini"


def test_explicit_provider_wins(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("REPLY_PROVIDER", "simulated")

    assert load_config().reply.provider == "simulated"


def test_session_overrides(monkeypatch):
    monkeypatch.setenv("REPLY_ORDERING", "completion")
    monkeypatch.setenv("REPLY_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("SEED_GREETING", "yes")

    session = load_config().session

    assert session.reply_ordering == "completion"
    assert session.reply_timeout_seconds == 2.5
    assert session.seed_greeting is True


def test_invalid_ordering_rejected(monkeypatch):
    monkeypatch.setenv("REPLY_ORDERING", "random")

    with pytest.raises(ValidationError):
        load_config()


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        SessionConfig(reply_timeout_seconds=0)
