"""Abstract interface for session completion tracking."""

from abc import ABC, abstractmethod
from collections.abc import Sequence


class CompletionTracker(ABC):
    """Turns "N segments queued" into a single session-completed event."""

    @abstractmethod
    def init_job_count(
        self,
        session_id: str,
        job_count: int,
        segment_ids: Sequence[str] | None = None,
    ) -> None:
        """
        Starts tracking a session and marks it "processing".

        Args:
            session_id: The session whose jobs were enqueued.
            job_count: Number of jobs enqueued for the session.
            segment_ids: Identifiers of the enqueued segments. When given,
                completions are counted once per segment.
        """

    @abstractmethod
    def complete_one(self, session_id: str, segment_id: str | None = None) -> int:
        """
        Records one finished job.

        Marks the session "completed" when nothing remains, or when the
        session is not being tracked at all.

        Returns:
            The number of jobs still outstanding.
        """

    @abstractmethod
    def remaining(self, session_id: str) -> int | None:
        """Returns outstanding jobs, or None when the session is not tracked."""

    @abstractmethod
    def discard(self, session_id: str) -> None:
        """Stops tracking a session without marking it completed."""
