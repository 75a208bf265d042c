"""Local Whisper server implementation of the TranscriptionService interface."""

import logging

import requests
from pydantic import ValidationError

from lecture_transcriber.domain.models import ChunkTranscriptionResult
from lecture_transcriber.exceptions import TranscriptionError
from lecture_transcriber.interfaces import TranscriptionService

logger = logging.getLogger(__name__)


class LocalWhisperTranscriber(TranscriptionService):
    """
    Calls a self-hosted Whisper server (e.g. faster-whisper behind HTTP).

    Only the file path is sent; the server is expected to read the audio from
    a volume it shares with the worker.
    """

    name = "whisper"

    def __init__(self, endpoint: str, session: requests.Session | None = None):
        self._endpoint = endpoint
        self._session = session or requests.Session()

    def transcribe(
        self,
        audio_path: str,
        language: str | None = None,
        prompt: str | None = None,
        timeout: float | None = None,
    ) -> ChunkTranscriptionResult:
        try:
            response = self._session.get(
                self._endpoint,
                params={"path": audio_path, "lang": language or "", "prompt": prompt or ""},
                timeout=timeout,
            )
            response.raise_for_status()
            return ChunkTranscriptionResult.model_validate(response.json())
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.warning(
                "Local Whisper transcription failed",
                extra={"audio_path": audio_path, "endpoint": self._endpoint},
            )
            raise TranscriptionError(audio_path, e) from e
