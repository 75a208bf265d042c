"""Splits transcript text into sentence-like paragraphs with synthetic timing."""

import re

from .models import Paragraph, TimedSegment

# Sentence-terminal punctuation (Latin and CJK) followed by whitespace
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?。！？])\s+")


class ParagraphSegmenter:
    """Builds paragraphs from merged transcript text."""

    def __init__(self, min_duration_ms: int = 2000, ms_per_char: int = 50):
        self._min_duration_ms = min_duration_ms
        self._ms_per_char = ms_per_char

    def segment(self, text: str) -> list[Paragraph]:
        """
        Splits text into sentences and lays them out back to back from 0 ms.

        Each paragraph lasts ``max(min_duration_ms, len(text) * ms_per_char)``.
        Empty or whitespace-only text yields an empty list.
        """
        sentences = [s.strip() for s in SENTENCE_BOUNDARY.split(text or "")]
        sentences = [s for s in sentences if s]

        paragraphs = []
        current_ms = 0
        for sentence in sentences:
            duration = max(self._min_duration_ms, len(sentence) * self._ms_per_char)
            paragraphs.append(
                Paragraph(
                    text=sentence, start_ms=current_ms, end_ms=current_ms + duration
                )
            )
            current_ms += duration
        return paragraphs

    def from_timed_segments(self, segments: list[TimedSegment]) -> list[Paragraph]:
        """
        Builds paragraphs from provider sub-segments instead of the heuristic.

        Empty segments are dropped. Start times are clamped to the previous
        paragraph's end and each paragraph is stretched to the duration floor,
        so paragraphs never overlap.
        """
        paragraphs = []
        previous_end = 0
        for seg in segments:
            text = seg.text.strip()
            if not text:
                continue
            start_ms = max(round(seg.start * 1000), previous_end)
            end_ms = max(round(seg.end * 1000), start_ms + self._min_duration_ms)
            paragraphs.append(Paragraph(text=text, start_ms=start_ms, end_ms=end_ms))
            previous_end = end_ms
        return paragraphs
