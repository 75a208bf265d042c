from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest
import requests
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from lecture_transcriber.db_models import AudioSegmentRecord, SessionRecord
from lecture_transcriber.domain.models import (
    AudioSegment,
    ChunkTranscriptionResult,
    TimedSegment,
)
from lecture_transcriber.exceptions import (
    EventPublishError,
    SessionNotFoundError,
    TranscriptionError,
)
from lecture_transcriber.infrastructure import SqlSessionStore
from lecture_transcriber.interfaces import (
    MessageBroker,
    MessagePublisher,
    ResultReporter,
    SessionStore,
    TranscriptionService,
)


class FakeStore(SessionStore):
    def __init__(self):
        self.statuses = {}
        self.segments = {}
        self.paragraphs = {}

    def add_session(self, session_id, status="uploaded", segment_paths=()):
        self.statuses[session_id] = status
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.segments[session_id] = [
            AudioSegment(
                id=f"{session_id}-seg-{i}",
                session_id=session_id,
                storage_path=path,
                created_at=base + timedelta(seconds=i),
            )
            for i, path in enumerate(segment_paths)
        ]

    def load_session_segments(self, session_id):
        if session_id not in self.statuses:
            raise SessionNotFoundError(session_id)
        return list(self.segments.get(session_id, []))

    def append_paragraphs(self, session_id, segment_id, paragraphs):
        self.paragraphs[(session_id, segment_id)] = list(paragraphs)

    def mark_session_status(self, session_id, status):
        if session_id in self.statuses:
            self.statuses[session_id] = status

    def get_session_status(self, session_id):
        if session_id not in self.statuses:
            raise SessionNotFoundError(session_id)
        return self.statuses[session_id]

    def get_paragraphs(self, session_id):
        result = []
        for segment in self.segments.get(session_id, []):
            result.extend(self.paragraphs.get((session_id, segment.id), []))
        return result


class FakeClock:
    """Manual monotonic clock; pass ``advance`` where a sleep function is expected."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeTranscriptionService(TranscriptionService):
    """Returns scripted results per path; an Exception in the script is raised."""

    name = "fake"

    def __init__(self, script=None, default=None, clock=None, call_seconds=0.0):
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.default = default
        self.clock = clock
        self.call_seconds = call_seconds
        self.calls = []
        self.timeouts = []

    def transcribe(self, audio_path, language=None, prompt=None, timeout=None):
        self.calls.append(audio_path)
        self.timeouts.append(timeout)
        if self.clock:
            self.clock.advance(self.call_seconds)
        queue = self.script.get(audio_path)
        outcome = queue.pop(0) if queue else self.default
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            raise TranscriptionError(audio_path)
        return outcome


class FakeReporter(ResultReporter):
    def __init__(self, error=None):
        self.reported = []
        self.error = error

    def report(self, payload):
        if self.error:
            raise self.error
        self.reported.append(payload)


class FakePublisher(MessagePublisher):
    def __init__(self, fail_after=None):
        self.published = []
        self.fail_after = fail_after

    def publish(self, routing_key, payload):
        if self.fail_after is not None and len(self.published) >= self.fail_after:
            raise EventPublishError(routing_key)
        self.published.append((routing_key, payload))


class FakeBroker(MessageBroker):
    def __init__(self):
        self.acked = []
        self.rejected = []

    def acknowledge(self, delivery_tag):
        self.acked.append(delivery_tag)

    def reject(self, delivery_tag, requeue=True):
        self.rejected.append((delivery_tag, requeue))

    def consume(self, callback):
        self.callback = callback

    def setup(self):
        pass


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response

    post = get


def result(text, *segments):
    return ChunkTranscriptionResult(
        text=text,
        segments=[TimedSegment(start=s, end=e, text=t) for s, e, t in segments],
    )


@pytest.fixture
def fake_store():
    return FakeStore()


class SeedableSqlSessionStore(SqlSessionStore):
    """SqlSessionStore plus the writes the upload service owns in production."""

    def create_session(self, session_id, status="uploaded"):
        with self._session_factory() as db_session:
            db_session.merge(SessionRecord(id=session_id, status=status))
            db_session.commit()

    def add_segment(self, session_id, storage_path, segment_id=None, created_at=None):
        with self._session_factory() as db_session:
            record = AudioSegmentRecord(session_id=session_id, storage_path=storage_path)
            if segment_id:
                record.id = segment_id
            if created_at:
                record.created_at = created_at
            db_session.add(record)
            db_session.commit()
            db_session.refresh(record)
            return self._to_segment(record)


@pytest.fixture
def sql_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    @contextmanager
    def session_factory():
        with Session(engine) as session:
            yield session

    return SeedableSqlSessionStore(session_factory)
