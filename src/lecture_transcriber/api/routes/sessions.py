"""Session ingest, result callback and transcript endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from lecture_transcriber.api.response_models import (
    IngestRequest,
    IngestResponse,
    SessionStatusResponse,
    TranscriptionResultResponse,
    TranscriptResponse,
)
from lecture_transcriber.dependencies import (
    get_completion_tracker,
    get_ingest_handler,
    get_result_handler,
    get_session_store,
)
from lecture_transcriber.domain import TranscriptionResultPayload
from lecture_transcriber.exceptions import (
    EventPublishError,
    NoSegmentsError,
    SessionNotFoundError,
    SessionPersistenceError,
    TrackerError,
)
from lecture_transcriber.handlers import SessionIngestHandler, TranscriptionResultHandler
from lecture_transcriber.interfaces import CompletionTracker, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

IngestHandlerDep = Annotated[SessionIngestHandler, Depends(get_ingest_handler)]
ResultHandlerDep = Annotated[TranscriptionResultHandler, Depends(get_result_handler)]
StoreDep = Annotated[SessionStore, Depends(get_session_store)]
TrackerDep = Annotated[CompletionTracker, Depends(get_completion_tracker)]


@router.post("/{session_id}/ingest", response_model=IngestResponse)
def ingest_session(
    session_id: str,
    handler: IngestHandlerDep,
    body: IngestRequest | None = None,
) -> IngestResponse:
    """Enqueues one transcription job per uploaded segment."""
    owner_id = body.owner_id if body else None
    try:
        jobs = handler.ingest(session_id, owner_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except NoSegmentsError:
        raise HTTPException(status_code=400, detail="No segments to process")
    except (EventPublishError, TrackerError):
        raise HTTPException(status_code=500, detail="Failed to start transcription")

    return IngestResponse(session_id=session_id, job_count=len(jobs))


@router.post(
    "/{session_id}/transcription-result", response_model=TranscriptionResultResponse
)
def receive_transcription_result(
    session_id: str,
    payload: TranscriptionResultPayload,
    handler: ResultHandlerDep,
) -> TranscriptionResultResponse:
    """Stores one segment's paragraphs and advances the session countdown."""
    if payload.session_id != session_id:
        raise HTTPException(status_code=400, detail="Session id mismatch")
    try:
        remaining = handler.handle(payload)
    except (SessionPersistenceError, TrackerError):
        raise HTTPException(status_code=500, detail="Failed to record result")

    return TranscriptionResultResponse(remaining_jobs=remaining)


@router.get("/{session_id}/status", response_model=SessionStatusResponse)
def get_session_status(
    session_id: str, store: StoreDep, tracker: TrackerDep
) -> SessionStatusResponse:
    try:
        status = store.get_session_status(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionStatusResponse(
        session_id=session_id,
        status=status,
        remaining_jobs=tracker.remaining(session_id),
    )


@router.get("/{session_id}/transcript", response_model=TranscriptResponse)
def get_transcript(session_id: str, store: StoreDep) -> TranscriptResponse:
    """Returns the paragraphs stored so far, ordered by segment then time."""
    try:
        status = store.get_session_status(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    return TranscriptResponse(
        session_id=session_id,
        status=status,
        paragraphs=store.get_paragraphs(session_id),
    )
