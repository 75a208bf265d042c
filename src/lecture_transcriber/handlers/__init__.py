from .session_ingest_handler import SessionIngestHandler
from .transcription_job_handler import TranscriptionJobHandler
from .transcription_result_handler import TranscriptionResultHandler

__all__ = [
    "SessionIngestHandler",
    "TranscriptionJobHandler",
    "TranscriptionResultHandler",
]
