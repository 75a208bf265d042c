"""Dependency wiring for the worker and the callback API.

Every collaborator is built on first use and cached, so importing a module
never opens a connection.
"""

import logging
from contextlib import contextmanager
from functools import lru_cache

import pika
import redis
from sqlmodel import Session, SQLModel, create_engine

from lecture_transcriber.config import AppConfig, load_config
from lecture_transcriber.domain import ChunkSplitter, ParagraphSegmenter, TranscriptMerger
from lecture_transcriber.domain.chunk_transcriber import ChunkTranscriber
from lecture_transcriber.domain.completion_tracker import InMemoryCompletionTracker
from lecture_transcriber.handlers import (
    SessionIngestHandler,
    TranscriptionJobHandler,
    TranscriptionResultHandler,
)
from lecture_transcriber.infrastructure import (
    HttpResultReporter,
    RabbitMQBroker,
    RabbitMQPublisher,
    RedisCompletionTracker,
    SqlSessionStore,
    build_transcription_service,
)
from lecture_transcriber.interfaces import CompletionTracker, MessagePublisher, SessionStore
from lecture_transcriber.worker import Worker

logger = logging.getLogger(__name__)


@lru_cache
def get_config() -> AppConfig:
    return load_config()


@lru_cache
def get_db_engine():
    url = get_config().database.url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, connect_args=connect_args)
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialized", extra={"dialect": engine.dialect.name})
    return engine


@contextmanager
def _session_factory():
    """Creates a database session context manager."""
    with Session(get_db_engine()) as session:
        yield session


@lru_cache
def get_session_store() -> SessionStore:
    return SqlSessionStore(_session_factory)


@lru_cache
def get_completion_tracker() -> CompletionTracker:
    """Returns the process-wide tracker shared by ingest and result handling."""
    config = get_config().tracker
    if config.backend == "redis":
        client = redis.Redis(
            host=config.redis_host, port=config.redis_port, decode_responses=True
        )
        if not client.ping():
            logger.error("Redis connection failed", extra={"host": config.redis_host})
            raise ConnectionError("Redis connection failed")
        return RedisCompletionTracker(client, get_session_store())
    return InMemoryCompletionTracker(get_session_store())


def _open_rabbit_channel():
    config = get_config().rabbitmq
    credentials = pika.PlainCredentials(config.user, config.password)
    parameters = pika.ConnectionParameters(
        host=config.host,
        credentials=credentials,
        heartbeat=0,
    )
    connection = pika.BlockingConnection(parameters)
    return connection.channel()


@lru_cache
def get_publisher() -> MessagePublisher:
    config = get_config().rabbitmq
    channel = _open_rabbit_channel()
    channel.exchange_declare(
        exchange=config.exchange_name,
        exchange_type="topic",
        durable=True,
    )
    return RabbitMQPublisher(channel, config.exchange_name)


def get_ingest_handler() -> SessionIngestHandler:
    return SessionIngestHandler(
        get_session_store(),
        get_completion_tracker(),
        get_publisher(),
        get_config().rabbitmq.queue_config.expected_routing_key,
    )


def get_result_handler() -> TranscriptionResultHandler:
    return TranscriptionResultHandler(get_session_store(), get_completion_tracker())


def get_job_handler() -> TranscriptionJobHandler:
    config = get_config()
    service = build_transcription_service(
        config.provider, config.worker.provider_timeout_seconds
    )
    transcriber = ChunkTranscriber(
        service,
        max_attempts=config.retry.max_attempts,
        base_delay_seconds=config.retry.base_delay_seconds,
        max_delay_seconds=config.retry.max_delay_seconds,
        timeout=config.worker.provider_timeout_seconds,
    )
    splitter = ChunkSplitter(
        config.chunking.max_chunk_bytes,
        work_dir=config.chunking.work_dir,
        ffmpeg_binary=config.chunking.ffmpeg_binary,
        max_workers=config.chunking.cut_workers,
    )
    return TranscriptionJobHandler(
        splitter,
        transcriber,
        TranscriptMerger(),
        ParagraphSegmenter(config.segmenter.min_duration_ms, config.segmenter.ms_per_char),
        HttpResultReporter(config.callback.api_base_url, config.callback.timeout_seconds),
        timing=config.segmenter.timing,
        job_timeout_seconds=config.worker.job_timeout_seconds,
        language=config.worker.language,
        prompt=config.worker.prompt,
    )


def get_worker() -> Worker:
    """Returns a worker wired to RabbitMQ, the provider and the session store."""
    config = get_config()
    broker = RabbitMQBroker(
        _open_rabbit_channel(), config.rabbitmq, prefetch=config.worker.concurrency
    )
    broker.setup()
    return Worker(
        broker,
        get_job_handler(),
        config.rabbitmq,
        config.worker,
        store=get_session_store(),
    )
