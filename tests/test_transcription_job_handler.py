import os

import pytest

from conftest import FakeClock, FakeReporter, FakeTranscriptionService, result
from lecture_transcriber.domain import (
    ChunkSplitter,
    ParagraphSegmenter,
    TranscriptionJob,
    TranscriptMerger,
)
from lecture_transcriber.domain.chunk_transcriber import ChunkTranscriber
from lecture_transcriber.exceptions import (
    AudioFileNotFoundError,
    CallbackDeliveryError,
    JobTimeoutError,
    TranscriptionError,
)
from lecture_transcriber.handlers import TranscriptionJobHandler


def _write_chunk(src, dst, start, duration, timeout=None):
    with open(dst, "wb") as f:
        f.write(b"chunk")


def _handler(service, reporter, max_chunk_bytes=1000, **kwargs):
    splitter = ChunkSplitter(max_chunk_bytes, probe=lambda p: 20.0, cut=_write_chunk)
    return TranscriptionJobHandler(
        splitter,
        ChunkTranscriber(service, sleep=lambda s: None),
        TranscriptMerger(),
        ParagraphSegmenter(),
        reporter,
        **kwargs,
    )


@pytest.fixture
def job(tmp_path):
    audio = tmp_path / "segment.mp3"
    audio.write_bytes(b"\0" * 100)
    return TranscriptionJob(
        segment_id="seg-1", session_id="s1", owner_id="lec-1", audio_path=str(audio)
    )


def test_reports_paragraphs_and_progress_milestones(job):
    service = FakeTranscriptionService(default=result("One. Two. Three."))
    reporter = FakeReporter()
    progress = []

    payload = _handler(service, reporter).process(job, progress.append)

    assert progress == [5, 50, 100]
    assert reporter.reported == [payload]
    assert payload.segment_id == "seg-1"
    assert payload.owner_id == "lec-1"
    assert [p.text for p in payload.paragraphs] == ["One.", "Two.", "Three."]


def test_empty_transcript_is_still_reported(job):
    reporter = FakeReporter()

    payload = _handler(FakeTranscriptionService(default=result("")), reporter).process(job)

    assert payload.paragraphs == []
    assert len(reporter.reported) == 1


def test_missing_audio_fails_before_any_progress(tmp_path):
    job = TranscriptionJob(
        segment_id="x", session_id="s1", audio_path=str(tmp_path / "gone.mp3")
    )
    progress = []

    with pytest.raises(AudioFileNotFoundError):
        _handler(FakeTranscriptionService(), FakeReporter()).process(job, progress.append)

    assert progress == []


def test_split_segment_with_failed_chunk_reports_remaining_text(job, tmp_path):
    chunk_1 = str(tmp_path / "segment_chunk_1.mp3")
    service = FakeTranscriptionService(
        script={chunk_1: [TranscriptionError(chunk_1)] * 3},
        default=result("Chunk text."),
    )
    reporter = FakeReporter()

    payload = _handler(service, reporter, max_chunk_bytes=40).process(job)

    assert [p.text for p in payload.paragraphs] == ["Chunk text.", "Chunk text."]
    assert sorted(os.listdir(tmp_path)) == ["segment.mp3"]


def test_chunks_are_cleaned_up_when_transcription_fails(job, tmp_path):
    service = FakeTranscriptionService(default=JobTimeoutError("seg-1", 1))

    with pytest.raises(JobTimeoutError):
        _handler(service, FakeReporter(), max_chunk_bytes=40).process(job)

    assert sorted(os.listdir(tmp_path)) == ["segment.mp3"]


def test_job_deadline_aborts_between_chunks(job):
    clock = FakeClock()
    service = FakeTranscriptionService(default=result("x."), clock=clock, call_seconds=6.0)
    reporter = FakeReporter()

    handler = _handler(
        service, reporter, max_chunk_bytes=40, job_timeout_seconds=10.0, clock=clock
    )

    with pytest.raises(JobTimeoutError):
        handler.process(job)

    assert len(service.calls) == 2
    assert service.timeouts == [10.0, 4.0]
    assert reporter.reported == []


def test_slow_unsplit_segment_is_not_reported_after_the_deadline(job):
    clock = FakeClock()
    service = FakeTranscriptionService(
        default=result("Late."), clock=clock, call_seconds=1000.0
    )
    reporter = FakeReporter()
    progress = []

    handler = _handler(service, reporter, job_timeout_seconds=10.0, clock=clock)

    with pytest.raises(JobTimeoutError):
        handler.process(job, progress.append)

    assert reporter.reported == []
    assert progress == [5]


def test_split_is_given_the_job_budget(job):
    timeouts = []

    def cut(src, dst, start, duration, timeout=None):
        timeouts.append(timeout)
        _write_chunk(src, dst, start, duration)

    splitter = ChunkSplitter(40, probe=lambda p: 20.0, cut=cut)
    handler = TranscriptionJobHandler(
        splitter,
        ChunkTranscriber(FakeTranscriptionService(default=result("x.")), sleep=lambda s: None),
        TranscriptMerger(),
        ParagraphSegmenter(),
        FakeReporter(),
        job_timeout_seconds=30.0,
        clock=FakeClock(),
    )

    handler.process(job)

    assert timeouts == [30.0, 30.0, 30.0]


def test_provider_timing_uses_merged_segments(job):
    service = FakeTranscriptionService(
        default=result("Hello there. General.", (1.0, 4.0, "Hello there."), (4.0, 9.0, "General."))
    )

    payload = _handler(service, FakeReporter(), timing="provider").process(job)

    assert [(p.start_ms, p.end_ms) for p in payload.paragraphs] == [(1000, 4000), (4000, 9000)]


def test_provider_timing_falls_back_to_heuristic_without_segments(job):
    service = FakeTranscriptionService(default=result("Hello there. General."))

    payload = _handler(service, FakeReporter(), timing="provider").process(job)

    assert [(p.start_ms, p.end_ms) for p in payload.paragraphs] == [(0, 2000), (2000, 4000)]


def test_callback_failure_propagates(job):
    reporter = FakeReporter(error=CallbackDeliveryError("http://api"))
    progress = []

    with pytest.raises(CallbackDeliveryError):
        _handler(FakeTranscriptionService(default=result("A.")), reporter).process(
            job, progress.append
        )

    assert progress == [5, 50]
