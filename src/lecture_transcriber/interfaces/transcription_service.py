"""Abstract interface for speech-to-text providers."""

from abc import ABC, abstractmethod

from lecture_transcriber.domain.models import ChunkTranscriptionResult


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text backends."""

    name: str = "unknown"

    @abstractmethod
    def transcribe(
        self,
        audio_path: str,
        language: str | None = None,
        prompt: str | None = None,
        timeout: float | None = None,
    ) -> ChunkTranscriptionResult:
        """
        Transcribes one audio file.

        Args:
            audio_path: Local path of the audio file or chunk.
            language: Optional language hint (ISO-639-1).
            prompt: Optional vocabulary / context prompt.
            timeout: Optional per-call timeout in seconds.

        Returns:
            Text plus optional time-stamped sub-segments in seconds.

        Raises:
            TranscriptionError: If the provider call fails.
            ProviderConfigurationError: If the adapter cannot run as configured.
        """
