"""AssemblyAI implementation of the Transcriber interface."""

import asyncio
import os
import tempfile

import assemblyai as aai

from chat_session.exceptions import StorageDownloadError, TranscriptionError
from chat_session.interfaces import StorageClient, Transcriber
from chat_session.logging import setup_logging

logger = setup_logging(__name__)

DEFAULT_AUDIO_SUFFIX = ".m4a"


class AssemblyAITranscriber(Transcriber):
    """Transcribes stored voice recordings using AssemblyAI."""

    def __init__(self, transcriber: aai.Transcriber, storage: StorageClient):
        self._transcriber = transcriber
        self._storage = storage

    async def transcribe(self, audio_reference: str) -> str:
        """
        Downloads the recording and transcribes it off the event loop.

        Both SDKs block, so each call runs in a worker thread and only the
        result comes back to the caller's loop.
        """
        try:
            audio_data = await asyncio.to_thread(self._storage.download, audio_reference)
        except StorageDownloadError as e:
            raise TranscriptionError(audio_reference, e) from e

        return await asyncio.to_thread(self._transcribe_bytes, audio_reference, audio_data)

    def _transcribe_bytes(self, audio_reference: str, audio_data: bytes) -> str:
        """
        Writes audio to a temp file (required by the AssemblyAI SDK) and
        transcribes it.
        """
        suffix = os.path.splitext(audio_reference)[1] or DEFAULT_AUDIO_SUFFIX
        try:
            with tempfile.NamedTemporaryFile(suffix=suffix, delete=True) as temp_file:
                temp_file.write(audio_data)
                temp_file.flush()

                transcription = self._transcriber.transcribe(temp_file.name)

            if transcription.status == aai.TranscriptStatus.error:
                raise TranscriptionError(audio_reference, Exception(transcription.error))

            if transcription.text is None:
                raise TranscriptionError(
                    audio_reference,
                    Exception("Transcription returned no text"),
                )

            logger.info(
                "Audio transcription successful",
                extra={"audio_reference": audio_reference, "characters": len(transcription.text)},
            )
            return transcription.text

        except TranscriptionError:
            raise
        except Exception as e:
            logger.exception(
                "AssemblyAI transcription failed", extra={"audio_reference": audio_reference}
            )
            raise TranscriptionError(audio_reference, e) from e
