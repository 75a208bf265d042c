"""Infrastructure adapters."""

from .assemblyai_transcriber import AssemblyAITranscriber
from .http_result_reporter import HttpResultReporter
from .local_whisper_transcriber import LocalWhisperTranscriber
from .openai_transcriber import OpenAIWhisperTranscriber
from .provider_factory import build_transcription_service
from .rabbitmq_broker import RabbitMQBroker
from .rabbitmq_publisher import RabbitMQPublisher
from .redis_completion_tracker import RedisCompletionTracker
from .sql_session_store import SqlSessionStore

__all__ = [
    "AssemblyAITranscriber",
    "HttpResultReporter",
    "LocalWhisperTranscriber",
    "OpenAIWhisperTranscriber",
    "RabbitMQBroker",
    "RabbitMQPublisher",
    "RedisCompletionTracker",
    "SqlSessionStore",
    "build_transcription_service",
]
