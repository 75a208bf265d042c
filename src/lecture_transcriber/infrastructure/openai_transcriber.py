"""OpenAI Whisper implementation of the TranscriptionService interface."""

import logging
from typing import Any

import openai
from openai import OpenAI

from lecture_transcriber.domain.models import ChunkTranscriptionResult, TimedSegment
from lecture_transcriber.exceptions import ProviderConfigurationError, TranscriptionError
from lecture_transcriber.interfaces import TranscriptionService

logger = logging.getLogger(__name__)


class OpenAIWhisperTranscriber(TranscriptionService):
    """Handles audio transcription using the OpenAI transcription endpoint."""

    name = "openai"

    def __init__(self, client: OpenAI, model: str = "whisper-1"):
        self._client = client
        self._model = model

    def transcribe(
        self,
        audio_path: str,
        language: str | None = None,
        prompt: str | None = None,
        timeout: float | None = None,
    ) -> ChunkTranscriptionResult:
        """
        Transcribes a file with segment-level timestamps (``verbose_json``).

        Authentication failures mean the adapter is misconfigured and are not
        worth retrying; every other failure is reported as transient.
        """
        payload: dict[str, Any] = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities": ["segment"],
        }
        if language:
            payload["language"] = language
        if prompt:
            payload["prompt"] = prompt
        if timeout is not None:
            payload["timeout"] = timeout

        try:
            with open(audio_path, "rb") as audio_file:
                response = self._client.audio.transcriptions.create(
                    file=audio_file, **payload
                )
        except openai.AuthenticationError as e:
            raise ProviderConfigurationError(self.name, str(e)) from e
        except (openai.OpenAIError, OSError) as e:
            logger.warning(
                "OpenAI transcription failed", extra={"audio_path": audio_path}
            )
            raise TranscriptionError(audio_path, e) from e

        segments = [
            TimedSegment(start=s.start, end=s.end, text=s.text)
            for s in (getattr(response, "segments", None) or [])
        ]
        return ChunkTranscriptionResult(
            text=getattr(response, "text", "") or "",
            segments=segments,
            language=getattr(response, "language", None),
        )
