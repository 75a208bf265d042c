"""Worker that handles queue message consumption and orchestration."""

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from pydantic import ValidationError

from lecture_transcriber.config import RabbitMQConfig, WorkerConfig
from lecture_transcriber.domain import TranscriptionJob
from lecture_transcriber.handlers import TranscriptionJobHandler
from lecture_transcriber.interfaces import MessageBroker, SessionStore
from lecture_transcriber.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class Worker:
    """
    Consumes transcription jobs and runs them on a bounded thread pool.

    At most ``concurrency`` jobs run at once, and job starts pass through a
    sliding-window rate limiter. A job that fails is handed back to the queue
    for redelivery; on its last allowed delivery the session is marked
    "error" and the message goes to the dead letter queue.
    """

    def __init__(
        self,
        broker: MessageBroker,
        handler: TranscriptionJobHandler,
        config: RabbitMQConfig,
        worker_config: WorkerConfig,
        store: SessionStore | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self._broker = broker
        self._handler = handler
        self._config = config
        self._store = store
        self._rate_limiter = rate_limiter or RateLimiter(
            worker_config.rate_limit_max, worker_config.rate_limit_period_seconds
        )
        self._executor = ThreadPoolExecutor(
            max_workers=worker_config.concurrency,
            thread_name_prefix="transcription-job",
        )

    def start(self) -> None:
        """Starts consuming messages from the queue. Blocks."""
        logger.info("Worker initialized, starting message consumption")
        self._broker.consume(self._on_message)

    def shutdown(self, wait: bool = True) -> None:
        """Stops accepting jobs and, by default, waits for running ones."""
        self._executor.shutdown(wait=wait)
        logger.info("Worker stopped")

    def _on_message(
        self, body: bytes, delivery_tag: int, headers: dict[str, Any] | None
    ) -> Future | None:
        """Callback for each received message."""
        # Quorum queues count previous deliveries; absent on the first one
        delivery_count = int(headers.get("x-delivery-count", 0)) if headers else 0
        max_attempts = self._config.queue_config.max_delivery_count

        try:
            job = TranscriptionJob.model_validate(json.loads(body))
        except (ValidationError, ValueError) as e:
            logger.exception("Invalid message format", extra={"error": str(e)})
            self._broker.reject(delivery_tag, requeue=False)
            return None

        logger.info(
            "Message received",
            extra={
                "session_id": job.session_id,
                "segment_id": job.segment_id,
                "attempt": delivery_count + 1,
                "max_attempts": max_attempts,
            },
        )

        return self._executor.submit(
            self._run_job, job, delivery_tag, delivery_count >= max_attempts
        )

    def _run_job(self, job: TranscriptionJob, delivery_tag: int, final_attempt: bool) -> None:
        waited = self._rate_limiter.acquire()
        if waited:
            logger.info(
                "Job start delayed by rate limit",
                extra={"segment_id": job.segment_id, "waited_seconds": round(waited, 3)},
            )

        def progress(value: int) -> None:
            logger.info(
                "Job progress",
                extra={
                    "session_id": job.session_id,
                    "segment_id": job.segment_id,
                    "progress": value,
                },
            )

        try:
            self._handler.process(job, progress)
        except Exception:
            logger.exception(
                "Message processing failed",
                extra={
                    "session_id": job.session_id,
                    "segment_id": job.segment_id,
                    "final_attempt": final_attempt,
                },
            )
            if final_attempt:
                self._mark_failed(job)
            self._broker.reject(delivery_tag, requeue=not final_attempt)
            return

        self._broker.acknowledge(delivery_tag)
        logger.info(
            "Message processed successfully",
            extra={"session_id": job.session_id, "segment_id": job.segment_id},
        )

    def _mark_failed(self, job: TranscriptionJob) -> None:
        if self._store is None:
            return
        try:
            self._store.mark_session_status(job.session_id, "error")
        except Exception:
            logger.exception(
                "Failed to mark session as errored",
                extra={"session_id": job.session_id},
            )
