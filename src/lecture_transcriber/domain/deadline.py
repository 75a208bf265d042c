"""Wall-clock budget for one transcription job."""

import time
from collections.abc import Callable

from lecture_transcriber.exceptions import JobTimeoutError


class JobDeadline:
    """
    Tracks how much of a job's time budget is left.

    Every blocking step of a job takes its timeout from ``bound``, so no single
    step can outlive the job.
    """

    def __init__(
        self,
        segment_id: str,
        timeout_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.segment_id = segment_id
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._expires_at = clock() + timeout_seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def check(self) -> None:
        """Raises JobTimeoutError once the budget is spent."""
        if self.expired():
            raise JobTimeoutError(self.segment_id, self.timeout_seconds)

    def bound(self, timeout: float | None) -> float:
        """Returns ``timeout`` shortened to the time left."""
        remaining = self.remaining()
        return remaining if timeout is None else min(timeout, remaining)
