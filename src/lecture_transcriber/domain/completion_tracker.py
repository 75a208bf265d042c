"""In-process session completion tracking."""

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

from lecture_transcriber.interfaces import CompletionTracker, SessionStore

logger = logging.getLogger(__name__)


@dataclass
class _JobCounter:
    count: int
    pending: set[str] | None = None
    done: set[str] = field(default_factory=set)


class InMemoryCompletionTracker(CompletionTracker):
    """
    Per-session countdown held in process memory.

    Counters are lost on restart: a session whose jobs were in flight stays
    "processing" until reconciled. Use the Redis tracker when that matters.

    Updates for one session are serialized by a per-session lock, so
    concurrent callbacks for the same session cannot lose a decrement.
    """

    def __init__(self, store: SessionStore):
        self._store = store
        self._counters: dict[str, _JobCounter] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def init_job_count(
        self,
        session_id: str,
        job_count: int,
        segment_ids: Sequence[str] | None = None,
    ) -> None:
        if job_count < 1:
            raise ValueError(f"job_count must be positive, got {job_count}")
        pending = None
        if segment_ids is not None:
            pending = set(segment_ids)
            if len(pending) != job_count:
                raise ValueError(
                    f"Expected {job_count} distinct segment ids, got {len(pending)}"
                )

        with self._session_lock(session_id):
            with self._registry_lock:
                self._counters[session_id] = _JobCounter(count=job_count, pending=pending)
            self._store.mark_session_status(session_id, "processing")

        logger.info(
            "Session jobs tracked",
            extra={"session_id": session_id, "job_count": job_count},
        )

    def complete_one(self, session_id: str, segment_id: str | None = None) -> int:
        with self._session_lock(session_id):
            counter = self._counters.get(session_id)

            if counter is None:
                # Late or untracked callback: nothing left to wait for.
                self._store.mark_session_status(session_id, "completed")
                logger.info(
                    "No job counter for session, marking completed",
                    extra={"session_id": session_id, "segment_id": segment_id},
                )
                return 0

            if counter.pending is not None and segment_id is not None:
                if segment_id not in counter.pending:
                    logger.warning(
                        "Duplicate or unknown segment completion ignored",
                        extra={
                            "session_id": session_id,
                            "segment_id": segment_id,
                            "already_done": segment_id in counter.done,
                        },
                    )
                    return counter.count
                counter.pending.discard(segment_id)
                counter.done.add(segment_id)
                counter.count = len(counter.pending)
            else:
                if counter.pending:
                    counter.done.add(counter.pending.pop())
                counter.count -= 1

            remaining = counter.count
            if remaining > 0:
                logger.info(
                    "Session job completed",
                    extra={"session_id": session_id, "remaining_jobs": remaining},
                )
                return remaining

            with self._registry_lock:
                del self._counters[session_id]
            self._store.mark_session_status(session_id, "completed")

        logger.info("Session completed", extra={"session_id": session_id})
        return 0

    def remaining(self, session_id: str) -> int | None:
        with self._registry_lock:
            counter = self._counters.get(session_id)
            return None if counter is None else counter.count

    def discard(self, session_id: str) -> None:
        with self._session_lock(session_id):
            with self._registry_lock:
                counter = self._counters.pop(session_id, None)

        if counter is not None:
            logger.info(
                "Session job counter discarded",
                extra={"session_id": session_id, "remaining_jobs": counter.count},
            )

    @contextmanager
    def _session_lock(self, session_id: str) -> Iterator[None]:
        """
        Holds the session's lock for the duration of the block.

        A lock is only removed from the registry by its holder, once the
        session has no counter. A waiter that wakes up on a removed lock
        retries with the registered one.
        """
        while True:
            with self._registry_lock:
                lock = self._locks.setdefault(session_id, threading.Lock())
            lock.acquire()
            with self._registry_lock:
                if self._locks.get(session_id) is lock:
                    break
            lock.release()

        try:
            yield
        finally:
            with self._registry_lock:
                if session_id not in self._counters:
                    del self._locks[session_id]
            lock.release()
