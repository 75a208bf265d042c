"""Domain models for the lecture transcription pipeline."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SessionStatus = Literal["idle", "uploaded", "processing", "completed", "error"]


class WireModel(BaseModel):
    """Base for models exchanged with the queue and the owning service (camelCase)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class AudioSegment(BaseModel, frozen=True):
    """One uploaded audio file belonging to a session."""

    id: str
    session_id: str
    storage_path: str
    created_at: datetime


class AudioChunk(BaseModel, frozen=True):
    """A contiguous time slice of an audio segment."""

    path: str
    index: int
    duration: float
    start_time: float = 0.0

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class TimedSegment(BaseModel, frozen=True):
    """A time-stamped piece of provider output, in seconds."""

    start: float
    end: float
    text: str


class ChunkTranscriptionResult(BaseModel, frozen=True):
    """Output of transcribing one audio chunk."""

    text: str = ""
    segments: list[TimedSegment] = Field(default_factory=list)
    language: str | None = None
    placeholder: bool = False

    @classmethod
    def placeholder_result(cls) -> "ChunkTranscriptionResult":
        """Stand-in for a chunk whose transcription permanently failed."""
        return cls(text="", segments=[], placeholder=True)


class MergedTranscript(BaseModel, frozen=True):
    """All chunk results of one segment combined on a single timeline."""

    text: str
    segments: list[TimedSegment]
    language: str | None = None
    chunk_offsets: list[float]
    placeholder_indices: list[int] = Field(default_factory=list)


class Paragraph(WireModel):
    """One sentence-like unit of a transcript with a time window in ms."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    start_ms: int
    end_ms: int


class TranscriptionJob(WireModel):
    """Queue message requesting transcription of one audio segment."""

    segment_id: str
    session_id: str
    owner_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ownerId", "lectureId", "owner_id"),
        serialization_alias="ownerId",
    )
    audio_path: str


class TranscriptionResultPayload(WireModel):
    """Result callback body sent to the owning service."""

    segment_id: str
    session_id: str
    owner_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ownerId", "lectureId", "owner_id"),
        serialization_alias="ownerId",
    )
    paragraphs: list[Paragraph] = Field(default_factory=list)
