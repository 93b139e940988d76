"""Dependency injection configuration for the conversation service."""

from functools import lru_cache, partial

import assemblyai as aai
from google import genai
from minio import Minio

from chat_session.config import AppConfig, load_config
from chat_session.domain import ConversationRegistry, ConversationSession
from chat_session.infrastructure import (
    AssemblyAITranscriber,
    GeminiReplyProvider,
    MinioStorageClient,
    SimulatedReplyProvider,
)
from chat_session.interfaces import ReplyProvider, StorageClient, Transcriber
from chat_session.logging import setup_logging

logger = setup_logging(__name__)

_config = load_config()


def get_config() -> AppConfig:
    """Returns the loaded application configuration."""
    return _config


@lru_cache(maxsize=1)
def get_storage() -> StorageClient:
    """Returns the configured storage client."""
    minio_client = Minio(
        endpoint=_config.minio.endpoint,
        access_key=_config.minio.user,
        secret_key=_config.minio.password,
        secure=_config.minio.secure,
    )
    return MinioStorageClient(minio_client, _config.minio.bucket_name)


@lru_cache(maxsize=1)
def get_reply_provider() -> ReplyProvider:
    """Returns the reply provider selected by configuration."""
    if _config.reply.provider == "gemini":
        gemini_client = genai.Client(api_key=_config.gemini.api_key)
        logger.info("Using Gemini reply provider", extra={"model": _config.gemini.model_name})
        return GeminiReplyProvider(
            gemini_client, _config.gemini.model_name, _config.gemini.system_prompt
        )

    logger.info("Using simulated reply provider")
    return SimulatedReplyProvider(
        min_delay_seconds=_config.reply.min_delay_seconds,
        max_delay_seconds=_config.reply.max_delay_seconds,
    )


@lru_cache(maxsize=1)
def get_transcriber() -> Transcriber:
    """Returns the configured transcription service."""
    aai.settings.api_key = _config.assemblyai.api_key
    aai_transcriber = aai.Transcriber(config=aai.TranscriptionConfig(speaker_labels=False))
    return AssemblyAITranscriber(aai_transcriber, get_storage())


@lru_cache(maxsize=1)
def get_registry() -> ConversationRegistry:
    """Returns the process-wide conversation registry."""
    session_factory = partial(
        ConversationSession,
        get_reply_provider(),
        get_transcriber(),
        reply_timeout_seconds=_config.session.reply_timeout_seconds,
        transcription_timeout_seconds=_config.session.transcription_timeout_seconds,
        reply_ordering=_config.session.reply_ordering,
    )
    return ConversationRegistry(session_factory)
