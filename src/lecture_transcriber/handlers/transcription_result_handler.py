"""Handler for segment results delivered back by the worker."""

import logging

from lecture_transcriber.domain import TranscriptionResultPayload
from lecture_transcriber.interfaces import CompletionTracker, SessionStore

logger = logging.getLogger(__name__)


class TranscriptionResultHandler:
    """Stores a segment's paragraphs and counts the segment as done."""

    def __init__(self, store: SessionStore, tracker: CompletionTracker):
        self._store = store
        self._tracker = tracker

    def handle(self, payload: TranscriptionResultPayload) -> int:
        """Returns the number of segments still outstanding for the session."""
        if payload.paragraphs:
            self._store.append_paragraphs(
                payload.session_id, payload.segment_id, payload.paragraphs
            )

        remaining = self._tracker.complete_one(payload.session_id, payload.segment_id)

        logger.info(
            "Transcription result received",
            extra={
                "session_id": payload.session_id,
                "segment_id": payload.segment_id,
                "paragraph_count": len(payload.paragraphs),
                "remaining_jobs": remaining,
            },
        )
        return remaining
