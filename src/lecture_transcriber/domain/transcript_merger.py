"""Core business logic for merging chunk results into one transcript."""

from .models import ChunkTranscriptionResult, MergedTranscript, TimedSegment


class TranscriptMerger:
    """Combines ordered chunk results onto a single timeline."""

    def merge(self, results: list[ChunkTranscriptionResult]) -> MergedTranscript:
        """
        Merges chunk results in order.

        Each result's sub-segments are shifted by the end time of the last
        sub-segment seen so far. A result without sub-segments (for example a
        placeholder for a failed chunk) leaves the offset where it was.

        Args:
            results: One result per chunk, in chunk order.

        Returns:
            MergedTranscript with joined text and re-based sub-segments.
        """
        text = " ".join(r.text for r in results).strip()

        segments: list[TimedSegment] = []
        chunk_offsets: list[float] = []
        placeholder_indices: list[int] = []
        offset = 0.0

        for index, result in enumerate(results):
            chunk_offsets.append(offset)
            if result.placeholder:
                placeholder_indices.append(index)
            if not result.segments:
                continue
            for seg in result.segments:
                segments.append(
                    TimedSegment(
                        start=seg.start + offset,
                        end=seg.end + offset,
                        text=seg.text,
                    )
                )
            offset = result.segments[-1].end + offset

        language = next((r.language for r in results if r.language), None)

        return MergedTranscript(
            text=text,
            segments=segments,
            language=language,
            chunk_offsets=chunk_offsets,
            placeholder_indices=placeholder_indices,
        )
