"""Application configuration loaded from environment variables."""

import os
from typing import Literal

from pydantic import BaseModel, Field


class SessionConfig(BaseModel, frozen=True):
    """Conversation session behavior."""

    reply_timeout_seconds: float = Field(default=5.0, gt=0)
    transcription_timeout_seconds: float = Field(default=30.0, gt=0)
    reply_ordering: Literal["request", "completion"] = "request"
    seed_greeting: bool = False


class ReplyProviderConfig(BaseModel, frozen=True):
    """Which reply provider backs new sessions."""

    provider: Literal["simulated", "gemini"] = "simulated"
    min_delay_seconds: float = Field(default=0.6, ge=0)
    max_delay_seconds: float = Field(default=1.4, ge=0)


class GeminiConfig(BaseModel, frozen=True):
    """Gemini LLM configuration."""

    api_key: str
    model_name: str = "gemini-2.5-flash-lite"
    system_prompt: str = (
        "You are a patient math tutor. Answer the student's question step by step "
        "and keep explanations short."
    )


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    api_key: str


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    bucket_name: str = "conversations"
    secure: bool = False


class ServerConfig(BaseModel, frozen=True):
    """HTTP server binding."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    session: SessionConfig
    reply: ReplyProviderConfig
    gemini: GeminiConfig
    assemblyai: AssemblyAIConfig
    minio: MinioConfig
    server: ServerConfig


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    gemini_api_key = os.getenv("GEMINI_API_KEY", "")
    return AppConfig(
        session=SessionConfig(
            reply_timeout_seconds=float(os.getenv("REPLY_TIMEOUT_SECONDS", "5.0")),
            transcription_timeout_seconds=float(
                os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "30.0")
            ),
            reply_ordering=os.getenv("REPLY_ORDERING", "request"),
            seed_greeting=_env_bool("SEED_GREETING", False),
        ),
        reply=ReplyProviderConfig(
            provider=os.getenv(
                "REPLY_PROVIDER", "gemini" if gemini_api_key else "simulated"
            ),
            min_delay_seconds=float(os.getenv("SIMULATED_MIN_DELAY_SECONDS", "0.6")),
            max_delay_seconds=float(os.getenv("SIMULATED_MAX_DELAY_SECONDS", "1.4")),
        ),
        gemini=GeminiConfig(
            api_key=gemini_api_key,
            model_name=os.getenv("GEMINI_MODEL_NAME", "gemini-2.5-flash-lite"),
        ),
        assemblyai=AssemblyAIConfig(
            api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
        ),
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            bucket_name=os.getenv("MINIO_BUCKET_NAME", "conversations"),
        ),
        server=ServerConfig(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        ),
    )
