"""Redis-backed session completion tracking that survives worker restarts."""

import logging
from collections.abc import Sequence

import redis

from lecture_transcriber.exceptions import TrackerError
from lecture_transcriber.interfaces import CompletionTracker, SessionStore

logger = logging.getLogger(__name__)

_MODE_SET = "set"
_MODE_COUNTER = "counter"


class RedisCompletionTracker(CompletionTracker):
    """
    Durable completion tracker.

    Each tracked session has a mode key plus either a set of pending segment
    ids or a plain counter. Every update runs as a MULTI/EXEC transaction, so
    exactly one completion observes the pending set reaching zero.

    The client must be created with ``decode_responses=True``.
    """

    def __init__(self, client: redis.Redis, store: SessionStore, key_prefix: str = "transcription"):
        self._client = client
        self._store = store
        self._key_prefix = key_prefix

    def init_job_count(
        self,
        session_id: str,
        job_count: int,
        segment_ids: Sequence[str] | None = None,
    ) -> None:
        if job_count < 1:
            raise ValueError(f"job_count must be positive, got {job_count}")
        ids = None
        if segment_ids is not None:
            ids = set(segment_ids)
            if len(ids) != job_count:
                raise ValueError(
                    f"Expected {job_count} distinct segment ids, got {len(ids)}"
                )

        pending, count, mode = self._keys(session_id)
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.delete(pending, count, mode)
            if ids:
                pipe.sadd(pending, *sorted(ids))
                pipe.set(mode, _MODE_SET)
            else:
                pipe.set(count, job_count)
                pipe.set(mode, _MODE_COUNTER)
            pipe.execute()
        except redis.RedisError as e:
            logger.exception("Redis init failed", extra={"session_id": session_id})
            raise TrackerError(session_id, "init", cause=e) from e

        self._store.mark_session_status(session_id, "processing")
        logger.info(
            "Session jobs tracked",
            extra={"session_id": session_id, "job_count": job_count},
        )

    def complete_one(self, session_id: str, segment_id: str | None = None) -> int:
        pending, count, mode_key = self._keys(session_id)
        try:
            mode = self._client.get(mode_key)
            if mode is None:
                logger.info(
                    "No job counter for session, marking completed",
                    extra={"session_id": session_id, "segment_id": segment_id},
                )
                self._store.mark_session_status(session_id, "completed")
                return 0

            pipe = self._client.pipeline(transaction=True)
            if mode == _MODE_SET:
                if segment_id is not None:
                    pipe.srem(pending, segment_id)
                else:
                    pipe.spop(pending)
                pipe.scard(pending)
                removed, remaining = pipe.execute()
                if not removed:
                    logger.warning(
                        "Duplicate or unknown segment completion ignored",
                        extra={"session_id": session_id, "segment_id": segment_id},
                    )
                    return remaining
            else:
                pipe.decr(count)
                (remaining,) = pipe.execute()

            remaining = int(remaining)
            if remaining > 0:
                logger.info(
                    "Session job completed",
                    extra={"session_id": session_id, "remaining_jobs": remaining},
                )
                return remaining

            self._client.delete(pending, count, mode_key)
        except redis.RedisError as e:
            logger.exception("Redis completion failed", extra={"session_id": session_id})
            raise TrackerError(session_id, "complete", cause=e) from e

        self._store.mark_session_status(session_id, "completed")
        logger.info("Session completed", extra={"session_id": session_id})
        return 0

    def remaining(self, session_id: str) -> int | None:
        pending, count, mode_key = self._keys(session_id)
        try:
            mode = self._client.get(mode_key)
            if mode is None:
                return None
            if mode == _MODE_SET:
                return int(self._client.scard(pending))
            return int(self._client.get(count) or 0)
        except redis.RedisError as e:
            raise TrackerError(session_id, "remaining", cause=e) from e

    def discard(self, session_id: str) -> None:
        try:
            removed = self._client.delete(*self._keys(session_id))
        except redis.RedisError as e:
            logger.exception("Redis discard failed", extra={"session_id": session_id})
            raise TrackerError(session_id, "discard", cause=e) from e

        if removed:
            logger.info("Session job counter discarded", extra={"session_id": session_id})

    def _keys(self, session_id: str) -> tuple[str, str, str]:
        base = f"{self._key_prefix}:session:{session_id}"
        return f"{base}:pending", f"{base}:count", f"{base}:mode"
