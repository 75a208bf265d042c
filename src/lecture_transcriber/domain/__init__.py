"""Domain layer exports."""

from .chunk_splitter import ChunkSplitter
from .deadline import JobDeadline
from .models import (
    AudioChunk,
    AudioSegment,
    ChunkTranscriptionResult,
    MergedTranscript,
    Paragraph,
    SessionStatus,
    TimedSegment,
    TranscriptionJob,
    TranscriptionResultPayload,
)
from .paragraph_segmenter import ParagraphSegmenter
from .transcript_merger import TranscriptMerger

__all__ = [
    "AudioChunk",
    "AudioSegment",
    "ChunkSplitter",
    "ChunkTranscriptionResult",
    "JobDeadline",
    "MergedTranscript",
    "Paragraph",
    "ParagraphSegmenter",
    "SessionStatus",
    "TimedSegment",
    "TranscriptMerger",
    "TranscriptionJob",
    "TranscriptionResultPayload",
]
