from lecture_transcriber.domain.models import Paragraph, SessionStatus, WireModel


class IngestRequest(WireModel):
    """Optional ingest body naming the owner that results are reported for."""

    owner_id: str | None = None


class IngestResponse(WireModel):
    session_id: str
    job_count: int


class TranscriptionResultResponse(WireModel):
    remaining_jobs: int


class SessionStatusResponse(WireModel):
    session_id: str
    status: SessionStatus
    remaining_jobs: int | None = None


class TranscriptResponse(WireModel):
    session_id: str
    status: SessionStatus
    paragraphs: list[Paragraph]
