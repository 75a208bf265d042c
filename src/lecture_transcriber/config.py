"""Application configuration loaded from environment variables."""

import os
from typing import Literal

from pydantic import BaseModel


class QueueConfig(BaseModel, frozen=True):
    """RabbitMQ queue configuration."""

    name: str
    queue_type: str = "quorum"
    max_delivery_count: int = 3
    expected_routing_key: str
    dlq_name: str
    dlq_exchange_name: str = "dead_letter_exchange"
    dlq_routing_key: str


class RabbitMQConfig(BaseModel, frozen=True):
    """RabbitMQ connection configuration."""

    host: str
    user: str
    password: str
    exchange_name: str = "events"
    queue_config: QueueConfig = QueueConfig(
        name="transcription_queue",
        queue_type="quorum",
        max_delivery_count=3,
        expected_routing_key="segment.transcription.requested",
        dlq_name="dlq_transcription",
        dlq_exchange_name="dead_letter_exchange",
        dlq_routing_key="segment.transcription.failed",
    )


class ChunkingConfig(BaseModel, frozen=True):
    """Audio chunking configuration."""

    # 24MB to stay under the provider's 25MB upload limit
    max_chunk_bytes: int = 24 * 1024 * 1024
    ffmpeg_binary: str = "ffmpeg"
    work_dir: str | None = None
    cut_workers: int | None = None


class RetryConfig(BaseModel, frozen=True):
    """Per-chunk retry configuration."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 5.0


class SegmenterConfig(BaseModel, frozen=True):
    """Paragraph segmentation configuration."""

    min_duration_ms: int = 2000
    ms_per_char: int = 50
    timing: Literal["heuristic", "provider"] = "heuristic"


class WorkerConfig(BaseModel, frozen=True):
    """Job worker pool configuration."""

    concurrency: int = 5
    rate_limit_max: int = 10
    rate_limit_period_seconds: float = 60.0
    job_timeout_seconds: float = 300.0
    provider_timeout_seconds: float = 120.0
    language: str | None = None
    prompt: str | None = None


class ProviderConfig(BaseModel, frozen=True):
    """Speech-to-text provider configuration."""

    name: Literal["openai", "assemblyai", "whisper"] = "openai"
    openai_api_key: str = ""
    openai_model: str = "whisper-1"
    assemblyai_api_key: str = ""
    whisper_endpoint: str = "http://localhost:9000/transcribe"


class CallbackConfig(BaseModel, frozen=True):
    """Owning-service callback configuration."""

    api_base_url: str
    timeout_seconds: float = 30.0


class TrackerConfig(BaseModel, frozen=True):
    """Session completion tracker configuration."""

    backend: Literal["memory", "redis"] = "memory"
    redis_host: str = "redis"
    redis_port: int = 6379


class DatabaseConfig(BaseModel, frozen=True):
    """Session store database configuration."""

    url: str


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    rabbitmq: RabbitMQConfig
    chunking: ChunkingConfig
    retry: RetryConfig
    segmenter: SegmenterConfig
    worker: WorkerConfig
    provider: ProviderConfig
    callback: CallbackConfig
    tracker: TrackerConfig
    database: DatabaseConfig


def _api_base_url() -> str:
    port = os.getenv("PORT", "4000")
    return (
        os.getenv("API_INTERNAL_URL")
        or os.getenv("API_URL")
        or f"http://127.0.0.1:{port}"
    )


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        rabbitmq=RabbitMQConfig(
            host=os.getenv("RABBITMQ_HOST", "rabbitmq"),
            user=os.getenv("RABBITMQ_USER", ""),
            password=os.getenv("RABBITMQ_PASSWORD", ""),
        ),
        chunking=ChunkingConfig(
            max_chunk_bytes=int(
                os.getenv("MAX_CHUNK_BYTES", str(24 * 1024 * 1024))
            ),
            ffmpeg_binary=os.getenv("FFMPEG_BINARY", "ffmpeg"),
            work_dir=os.getenv("CHUNK_WORK_DIR") or None,
            cut_workers=int(os.getenv("CHUNK_CUT_WORKERS", "0")) or None,
        ),
        retry=RetryConfig(
            max_attempts=int(os.getenv("CHUNK_MAX_ATTEMPTS", "3")),
        ),
        segmenter=SegmenterConfig(
            min_duration_ms=int(os.getenv("MIN_SENTENCE_DURATION_MS", "2000")),
            ms_per_char=int(os.getenv("CHAR_TO_MS_RATIO", "50")),
            timing=os.getenv("PARAGRAPH_TIMING", "heuristic"),
        ),
        worker=WorkerConfig(
            concurrency=int(os.getenv("TRANSCRIBE_CONCURRENCY", "5")),
            rate_limit_max=int(os.getenv("TRANSCRIBE_RATE_LIMIT_MAX", "10")),
            rate_limit_period_seconds=float(
                os.getenv("TRANSCRIBE_RATE_LIMIT_PERIOD_SECONDS", "60")
            ),
            job_timeout_seconds=float(os.getenv("WORKER_JOB_TIMEOUT_SECONDS", "300")),
            provider_timeout_seconds=float(
                os.getenv("STT_TIMEOUT_SECONDS", "120")
            ),
            language=os.getenv("STT_LANGUAGE") or None,
            prompt=os.getenv("STT_PROMPT") or None,
        ),
        provider=ProviderConfig(
            name=os.getenv("STT_PROVIDER", "openai").lower(),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_STT_MODEL", "whisper-1"),
            assemblyai_api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
            whisper_endpoint=os.getenv(
                "WHISPER_ENDPOINT", "http://localhost:9000/transcribe"
            ),
        ),
        callback=CallbackConfig(
            api_base_url=_api_base_url(),
            timeout_seconds=float(os.getenv("API_TIMEOUT_SECONDS", "30")),
        ),
        tracker=TrackerConfig(
            backend=os.getenv("COMPLETION_TRACKER", "memory"),
            redis_host=os.getenv("REDIS_HOST", "redis"),
            redis_port=int(os.getenv("REDIS_PORT", "6379")),
        ),
        database=DatabaseConfig(
            url=os.getenv("DATABASE_URL", "sqlite:///lecture_transcriber.db"),
        ),
    )
