"""AssemblyAI implementation of the TranscriptionService interface."""

import logging
import time
from collections.abc import Callable

import assemblyai as aai

from lecture_transcriber.domain.models import ChunkTranscriptionResult, TimedSegment
from lecture_transcriber.exceptions import TranscriptionError
from lecture_transcriber.interfaces import TranscriptionService

logger = logging.getLogger(__name__)

_FINISHED = (aai.TranscriptStatus.completed, aai.TranscriptStatus.error)


class AssemblyAITranscriber(TranscriptionService):
    """Handles audio transcription using AssemblyAI."""

    name = "assemblyai"

    def __init__(
        self,
        transcriber: aai.Transcriber,
        *,
        fetch: Callable[[str], aai.Transcript] = aai.Transcript.get_by_id,
        poll_interval_seconds: float = 3.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._transcriber = transcriber
        self._fetch = fetch
        self._poll_interval_seconds = poll_interval_seconds
        self._sleep = sleep
        self._clock = clock

    def transcribe(
        self,
        audio_path: str,
        language: str | None = None,
        prompt: str | None = None,
        timeout: float | None = None,
    ) -> ChunkTranscriptionResult:
        """
        Transcribes a local file using AssemblyAI.

        The file is submitted and then polled, so ``timeout`` bounds the whole
        wait for the transcript. Utterance timestamps (milliseconds) become
        sub-segments in seconds.
        """
        options = {"speaker_labels": True}
        if language:
            options["language_code"] = language
        if prompt:
            options["word_boost"] = [w.strip() for w in prompt.split(",") if w.strip()]
        config = aai.TranscriptionConfig(**options)

        expires_at = None if timeout is None else self._clock() + timeout
        try:
            transcript = self._transcriber.submit(audio_path, config=config)
            while transcript.status not in _FINISHED:
                if expires_at is not None and self._clock() >= expires_at:
                    raise TimeoutError(f"Transcript not finished after {timeout}s")
                self._sleep(self._poll_delay(expires_at))
                transcript = self._fetch(transcript.id)
        except Exception as e:
            logger.exception(
                "AssemblyAI transcription failed", extra={"audio_path": audio_path}
            )
            raise TranscriptionError(audio_path, e) from e

        if transcript.status == aai.TranscriptStatus.error:
            raise TranscriptionError(audio_path, Exception(transcript.error))

        segments = [
            TimedSegment(start=u.start / 1000, end=u.end / 1000, text=u.text)
            for u in (transcript.utterances or [])
        ]

        logger.info(
            "Audio transcription successful",
            extra={"audio_path": audio_path, "utterance_count": len(segments)},
        )
        return ChunkTranscriptionResult(
            text=transcript.text or "",
            segments=segments,
            language=(transcript.json_response or {}).get("language_code"),
        )

    def _poll_delay(self, expires_at: float | None) -> float:
        if expires_at is None:
            return self._poll_interval_seconds
        return max(0.0, min(self._poll_interval_seconds, expires_at - self._clock()))
