"""Handler that enqueues one transcription job per session segment."""

import logging

from lecture_transcriber.domain import TranscriptionJob
from lecture_transcriber.exceptions import EventPublishError, NoSegmentsError
from lecture_transcriber.interfaces import CompletionTracker, MessagePublisher, SessionStore

logger = logging.getLogger(__name__)


class SessionIngestHandler:
    """Starts transcription of every uploaded segment of a session."""

    def __init__(
        self,
        store: SessionStore,
        tracker: CompletionTracker,
        publisher: MessagePublisher,
        routing_key: str,
    ):
        self._store = store
        self._tracker = tracker
        self._publisher = publisher
        self._routing_key = routing_key

    def ingest(self, session_id: str, owner_id: str | None = None) -> list[TranscriptionJob]:
        """
        Registers the session's job count and publishes its jobs.

        Raises:
            SessionNotFoundError: If the session does not exist.
            NoSegmentsError: If the session has no segments.
            EventPublishError: If a job cannot be enqueued; the session is
                marked "error" and no longer tracked.
        """
        segments = self._store.load_session_segments(session_id)
        if not segments:
            raise NoSegmentsError(session_id)

        self._tracker.init_job_count(
            session_id, len(segments), [segment.id for segment in segments]
        )

        jobs = [
            TranscriptionJob(
                segment_id=segment.id,
                session_id=session_id,
                owner_id=owner_id,
                audio_path=segment.storage_path,
            )
            for segment in segments
        ]

        try:
            for job in jobs:
                self._publisher.publish(self._routing_key, job.to_wire())
        except EventPublishError:
            logger.exception(
                "Failed to enqueue session jobs", extra={"session_id": session_id}
            )
            self._tracker.discard(session_id)
            self._store.mark_session_status(session_id, "error")
            raise

        logger.info(
            "Session ingested",
            extra={"session_id": session_id, "job_count": len(jobs)},
        )
        return jobs
