"""Abstract interface for speech-to-text."""

from abc import ABC, abstractmethod


class Transcriber(ABC):
    """Abstract base class for transcription backends."""

    @abstractmethod
    async def transcribe(self, audio_reference: str) -> str:
        """
        Transcribes a recorded voice message.

        Callers must tolerate this never completing and bound it with a timeout.

        Args:
            audio_reference: Handle of the stored recording.

        Returns:
            The transcript text.

        Raises:
            TranscriptionError: If transcription fails.
        """
        pass
