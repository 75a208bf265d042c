"""Handler that turns one queued audio segment into reported paragraphs."""

import logging
import os
import time
from collections.abc import Callable

from lecture_transcriber.domain import (
    ChunkSplitter,
    JobDeadline,
    ParagraphSegmenter,
    TranscriptionJob,
    TranscriptionResultPayload,
    TranscriptMerger,
)
from lecture_transcriber.domain.chunk_transcriber import ChunkTranscriber
from lecture_transcriber.exceptions import AudioFileNotFoundError
from lecture_transcriber.interfaces import ResultReporter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class TranscriptionJobHandler:
    """Handles split, transcribe, merge, segment and report for one job."""

    def __init__(
        self,
        splitter: ChunkSplitter,
        transcriber: ChunkTranscriber,
        merger: TranscriptMerger,
        segmenter: ParagraphSegmenter,
        reporter: ResultReporter,
        *,
        timing: str = "heuristic",
        job_timeout_seconds: float | None = None,
        language: str | None = None,
        prompt: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._splitter = splitter
        self._transcriber = transcriber
        self._merger = merger
        self._segmenter = segmenter
        self._reporter = reporter
        self._timing = timing
        self._job_timeout_seconds = job_timeout_seconds
        self._language = language
        self._prompt = prompt
        self._clock = clock

    def process(
        self, job: TranscriptionJob, progress: ProgressCallback | None = None
    ) -> TranscriptionResultPayload:
        """
        Processes a transcription job end to end.

        Args:
            job: The dequeued job.
            progress: Receives the 5 / 50 / 100 milestones.

        Returns:
            The payload that was reported, possibly with no paragraphs.

        Raises:
            AudioFileNotFoundError: If the segment file is missing.
            AudioProbeError: If the file cannot be probed.
            AudioSplitError: If slicing fails.
            TranscriptionError: If an unsplit segment's provider call fails.
            ProviderConfigurationError: If the provider adapter is misconfigured.
            JobTimeoutError: If the job deadline passes.
            CallbackDeliveryError: If the result cannot be reported.
        """
        logger.info(
            "Processing segment",
            extra={
                "session_id": job.session_id,
                "segment_id": job.segment_id,
                "audio_path": job.audio_path,
            },
        )

        if not os.path.isfile(job.audio_path):
            raise AudioFileNotFoundError(job.audio_path)

        self._report_progress(progress, 5)

        deadline = self._start_deadline(job)
        chunks = self._splitter.split(
            job.audio_path, timeout=deadline.remaining() if deadline else None
        )
        try:
            results = self._transcriber.transcribe_segment(
                chunks, self._language, self._prompt, deadline=deadline
            )
        finally:
            self._splitter.cleanup(chunks, job.audio_path)

        merged = self._merger.merge(results)
        self._report_progress(progress, 50)

        if self._timing == "provider" and merged.segments:
            paragraphs = self._segmenter.from_timed_segments(merged.segments)
        else:
            paragraphs = self._segmenter.segment(merged.text)

        if not paragraphs:
            logger.warning(
                "Segment produced no paragraphs",
                extra={"session_id": job.session_id, "segment_id": job.segment_id},
            )

        payload = TranscriptionResultPayload(
            segment_id=job.segment_id,
            session_id=job.session_id,
            owner_id=job.owner_id,
            paragraphs=paragraphs,
        )
        if deadline:
            deadline.check()
        self._reporter.report(payload)
        self._report_progress(progress, 100)

        logger.info(
            "Segment processed",
            extra={
                "session_id": job.session_id,
                "segment_id": job.segment_id,
                "chunk_count": len(chunks),
                "paragraph_count": len(paragraphs),
                "placeholder_chunks": merged.placeholder_indices,
                "language": merged.language,
            },
        )
        return payload

    def _start_deadline(self, job: TranscriptionJob) -> JobDeadline | None:
        if not self._job_timeout_seconds:
            return None
        return JobDeadline(job.segment_id, self._job_timeout_seconds, clock=self._clock)

    @staticmethod
    def _report_progress(progress: ProgressCallback | None, value: int) -> None:
        if progress:
            progress(value)
