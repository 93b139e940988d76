"""Infrastructure layer exports."""

from .assemblyai_transcriber import AssemblyAITranscriber
from .gemini_reply_provider import GeminiReplyProvider
from .minio_storage import MinioStorageClient
from .simulated_reply_provider import SimulatedReplyProvider

__all__ = [
    "AssemblyAITranscriber",
    "GeminiReplyProvider",
    "MinioStorageClient",
    "SimulatedReplyProvider",
]
