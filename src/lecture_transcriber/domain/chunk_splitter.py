"""Splits audio files that exceed the provider's upload limit."""

import logging
import math
import os
import subprocess
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from pydub.utils import mediainfo

from lecture_transcriber.exceptions import AudioProbeError, AudioSplitError

from .models import AudioChunk

logger = logging.getLogger(__name__)

# 24MB to stay under the 25MB OpenAI upload limit
DEFAULT_MAX_CHUNK_BYTES = 24 * 1024 * 1024


def probe_duration(path: str) -> float:
    """Returns the duration of ``path`` in seconds using ffprobe via pydub."""
    try:
        info = mediainfo(path)
    except Exception as e:
        raise AudioProbeError(path, e) from e

    raw = info.get("duration")
    try:
        duration = float(raw)
    except (TypeError, ValueError) as e:
        raise AudioProbeError(
            path, ValueError(f"Could not determine audio duration: {raw!r}")
        ) from e

    if duration <= 0:
        raise AudioProbeError(path, ValueError("Audio duration is not positive"))
    return duration


def cut_with_ffmpeg(
    source_path: str,
    chunk_path: str,
    start_time: float,
    duration: float,
    *,
    ffmpeg_binary: str = "ffmpeg",
    timeout: float | None = None,
) -> None:
    """Copies ``[start_time, start_time + duration)`` of the source without re-encoding."""
    cmd = [
        ffmpeg_binary,
        "-hide_banner",
        "-loglevel",
        "error",
        "-y",
        "-ss",
        f"{start_time:.3f}",
        "-t",
        f"{duration:.3f}",
        "-i",
        source_path,
        "-c",
        "copy",
        chunk_path,
    ]
    subprocess.run(cmd, check=True, capture_output=True, text=True, timeout=timeout)


class ChunkSplitter:
    """Cuts audio into equal-duration, size-bounded chunks."""

    def __init__(
        self,
        max_chunk_bytes: int = DEFAULT_MAX_CHUNK_BYTES,
        *,
        work_dir: str | None = None,
        ffmpeg_binary: str = "ffmpeg",
        probe: Callable[[str], float] = probe_duration,
        cut: Callable[..., None] | None = None,
        max_workers: int | None = None,
    ):
        self._max_chunk_bytes = max_chunk_bytes
        self._max_workers = max_workers or os.cpu_count() or 1
        self._work_dir = work_dir
        self._probe = probe
        self._cut = cut or partial(cut_with_ffmpeg, ffmpeg_binary=ffmpeg_binary)

    def split(self, audio_path: str, timeout: float | None = None) -> list[AudioChunk]:
        """
        Splits an audio file into chunks that fit the provider size limit.

        Args:
            audio_path: Path to a readable audio file.
            timeout: Seconds each ffmpeg cut may run before it is killed.

        Returns:
            Chunks ordered by index. A file within the limit yields one chunk
            pointing at the original file.

        Raises:
            AudioProbeError: If the file cannot be read or has no duration.
            AudioSplitError: If slicing fails.
        """
        try:
            size_bytes = os.path.getsize(audio_path)
        except OSError as e:
            raise AudioProbeError(audio_path, e) from e

        total_duration = self._probe(audio_path)

        if size_bytes <= self._max_chunk_bytes:
            return [AudioChunk(path=audio_path, index=0, duration=total_duration)]

        num_chunks = math.ceil(size_bytes / self._max_chunk_bytes)
        chunk_duration = total_duration / num_chunks

        logger.info(
            "Splitting audio",
            extra={
                "audio_path": audio_path,
                "size_bytes": size_bytes,
                "num_chunks": num_chunks,
                "chunk_duration": round(chunk_duration, 3),
            },
        )

        planned = self._plan_chunks(audio_path, total_duration, num_chunks)

        workers = min(num_chunks, self._max_workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._create_chunk, audio_path, c, timeout) for c in planned
            ]
            errors = []
            chunks = []
            for future in futures:
                try:
                    chunks.append(future.result())
                except Exception as e:
                    errors.append(e)

        if errors:
            self.cleanup(planned, audio_path)
            raise AudioSplitError(audio_path, errors[0]) from errors[0]

        chunks.sort(key=lambda c: c.index)
        return chunks

    def cleanup(self, chunks: list[AudioChunk], original_path: str) -> None:
        """Deletes chunk files, never the original audio file."""
        for chunk in chunks:
            if os.path.abspath(chunk.path) == os.path.abspath(original_path):
                continue
            try:
                os.remove(chunk.path)
            except FileNotFoundError:
                continue
            except OSError:
                logger.warning(
                    "Failed to delete chunk", extra={"chunk_path": chunk.path}
                )

    def _plan_chunks(
        self, audio_path: str, total_duration: float, num_chunks: int
    ) -> list[AudioChunk]:
        """Lays out contiguous chunks; the last one absorbs rounding slack."""
        chunk_duration = total_duration / num_chunks
        directory = self._work_dir or os.path.dirname(audio_path)
        base, ext = os.path.splitext(os.path.basename(audio_path))

        planned = []
        for i in range(num_chunks):
            start_time = i * chunk_duration
            if i == num_chunks - 1:
                duration = total_duration - start_time
            else:
                duration = chunk_duration
            planned.append(
                AudioChunk(
                    path=os.path.join(directory, f"{base}_chunk_{i}{ext}"),
                    index=i,
                    duration=duration,
                    start_time=start_time,
                )
            )
        return planned

    def _create_chunk(
        self, audio_path: str, chunk: AudioChunk, timeout: float | None
    ) -> AudioChunk:
        try:
            self._cut(
                audio_path, chunk.path, chunk.start_time, chunk.duration, timeout=timeout
            )
        except subprocess.CalledProcessError as e:
            logger.error(
                "ffmpeg failed to create chunk",
                extra={"chunk_index": chunk.index, "stderr": e.stderr},
            )
            raise
        except subprocess.TimeoutExpired:
            logger.error(
                "ffmpeg timed out creating chunk",
                extra={"chunk_index": chunk.index, "timeout_seconds": timeout},
            )
            raise
        logger.info(
            "Chunk created",
            extra={"chunk_index": chunk.index, "chunk_path": chunk.path},
        )
        return chunk
