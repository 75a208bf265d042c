"""Interface exports."""

from .completion_tracker import CompletionTracker
from .message_broker import MessageBroker, MessagePublisher
from .result_reporter import ResultReporter
from .session_store import SessionStore
from .transcription_service import TranscriptionService

__all__ = [
    "CompletionTracker",
    "MessageBroker",
    "MessagePublisher",
    "ResultReporter",
    "SessionStore",
    "TranscriptionService",
]
