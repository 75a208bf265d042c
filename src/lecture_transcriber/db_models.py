from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column
from sqlalchemy.types import Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionRecord(SQLModel, table=True):
    __tablename__ = "sessions"

    id: str = Field(primary_key=True, max_length=64)
    status: str = Field(default="idle", max_length=32)
    created_at: datetime = Field(default_factory=_utcnow)


class AudioSegmentRecord(SQLModel, table=True):
    __tablename__ = "audio_segments"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=64)
    session_id: str = Field(foreign_key="sessions.id", index=True)
    storage_path: str
    created_at: datetime = Field(default_factory=_utcnow)


class ParagraphRecord(SQLModel, table=True):
    __tablename__ = "paragraphs"

    id: str = Field(primary_key=True, max_length=64)
    session_id: str = Field(foreign_key="sessions.id", index=True)
    segment_id: str = Field(foreign_key="audio_segments.id", index=True)
    position: int
    text: str = Field(sa_column=Column(Text, nullable=False))
    start_ms: int
    end_ms: int
