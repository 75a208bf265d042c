"""Per-chunk transcription with bounded retry and placeholder fallback."""

import logging
import time
from collections.abc import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lecture_transcriber.exceptions import JobTimeoutError, TranscriptionError
from lecture_transcriber.interfaces import TranscriptionService

from .deadline import JobDeadline
from .models import AudioChunk, ChunkTranscriptionResult

logger = logging.getLogger(__name__)


class ChunkTranscriber:
    """
    Runs the speech-to-text provider over the chunks of one audio segment.

    Chunks are transcribed one at a time in index order to keep provider
    rate-limit pressure bounded. A chunk that keeps failing is replaced by an
    empty placeholder so the result list always lines up with the chunk list.
    """

    def __init__(
        self,
        service: TranscriptionService,
        *,
        max_attempts: int = 3,
        base_delay_seconds: float = 1.0,
        max_delay_seconds: float = 5.0,
        timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._service = service
        self._max_attempts = max_attempts
        self._base_delay_seconds = base_delay_seconds
        self._max_delay_seconds = max_delay_seconds
        self._timeout = timeout
        self._sleep = sleep

    def transcribe(
        self,
        chunk: AudioChunk,
        language: str | None = None,
        prompt: str | None = None,
        deadline: JobDeadline | None = None,
    ) -> ChunkTranscriptionResult:
        """Single direct provider call; errors propagate to the caller."""
        timeout = self._timeout
        if deadline:
            deadline.check()
            timeout = deadline.bound(timeout)
        return self._service.transcribe(
            chunk.path, language=language, prompt=prompt, timeout=timeout
        )

    def transcribe_segment(
        self,
        chunks: list[AudioChunk],
        language: str | None = None,
        prompt: str | None = None,
        deadline: JobDeadline | None = None,
    ) -> list[ChunkTranscriptionResult]:
        """
        Transcribes every chunk of a segment.

        Args:
            chunks: Chunks ordered by index.
            language: Optional language hint passed to the provider.
            prompt: Optional prompt passed to the provider.
            deadline: Job budget. Provider timeouts and retry back-off are
                shortened to fit in it.

        Returns:
            Exactly one result per chunk, in chunk order. Chunks whose retries
            were exhausted get an empty placeholder result.

        Raises:
            TranscriptionError: Only for an unsplit segment, whose single call
                is not retried here.
            JobTimeoutError: When the deadline passes before every chunk is done.
            ProviderConfigurationError: Never retried, never absorbed.
        """
        ordered = sorted(chunks, key=lambda c: c.index)

        if len(ordered) == 1:
            result = self.transcribe(ordered[0], language, prompt, deadline)
            if deadline:
                deadline.check()
            return [result]

        results: list[ChunkTranscriptionResult] = []
        failed_indices: list[int] = []

        for chunk in ordered:
            try:
                result = self._transcribe_with_retry(chunk, language, prompt, deadline)
            except TranscriptionError as e:
                if deadline and deadline.expired():
                    raise JobTimeoutError(
                        deadline.segment_id, deadline.timeout_seconds
                    ) from e
                logger.exception(
                    "Chunk transcription failed after retries",
                    extra={"chunk_index": chunk.index, "attempts": self._max_attempts},
                )
                result = ChunkTranscriptionResult.placeholder_result()
                failed_indices.append(chunk.index)
            else:
                logger.info(
                    "Chunk transcribed",
                    extra={
                        "chunk_index": chunk.index,
                        "chunk_count": len(ordered),
                        "text_length": len(result.text),
                    },
                )
            results.append(result)

        if deadline:
            deadline.check()

        if failed_indices:
            logger.warning(
                "Chunks fell back to placeholders",
                extra={"chunk_indices": failed_indices, "chunk_count": len(ordered)},
            )

        return results

    def _transcribe_with_retry(
        self,
        chunk: AudioChunk,
        language: str | None,
        prompt: str | None,
        deadline: JobDeadline | None,
    ) -> ChunkTranscriptionResult:
        stop = stop_after_attempt(self._max_attempts)
        backoff = wait_exponential(
            multiplier=self._base_delay_seconds, max=self._max_delay_seconds
        )

        def stop_at_deadline(retry_state: RetryCallState) -> bool:
            return stop(retry_state) or bool(deadline and deadline.expired())

        def wait_within_deadline(retry_state: RetryCallState) -> float:
            delay = backoff(retry_state)
            return min(delay, deadline.remaining()) if deadline else delay

        retrying = Retrying(
            stop=stop_at_deadline,
            wait=wait_within_deadline,
            retry=retry_if_exception_type(TranscriptionError),
            sleep=self._sleep,
            before_sleep=self._log_retry(chunk),
            reraise=True,
        )
        return retrying(self.transcribe, chunk, language, prompt, deadline)

    def _log_retry(self, chunk: AudioChunk) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            logger.warning(
                "Chunk transcription attempt failed, retrying",
                extra={
                    "chunk_index": chunk.index,
                    "attempt": retry_state.attempt_number,
                    "max_attempts": self._max_attempts,
                    "delay_seconds": retry_state.next_action.sleep,
                    "error": str(retry_state.outcome.exception()),
                },
            )

        return before_sleep
