"""Custom exceptions for the lecture transcription pipeline."""


class AudioFileNotFoundError(Exception):
    """Raised when a job's audio file does not exist on disk."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Segment file not found: '{path}'")


class AudioProbeError(Exception):
    """Raised when an audio file's duration or size cannot be determined."""

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to probe audio file '{path}'")


class AudioSplitError(Exception):
    """Raised when slicing an audio file into chunks fails."""

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to split audio file '{path}' into chunks")


class TranscriptionError(Exception):
    """Raised when a speech-to-text provider call fails."""

    def __init__(self, file_name: str, cause: Exception | None = None):
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Failed to transcribe audio file '{file_name}'")


class ProviderConfigurationError(Exception):
    """Raised when a speech-to-text provider cannot be used as configured."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"Provider '{provider}' is misconfigured: {reason}")


class JobTimeoutError(Exception):
    """Raised when a transcription job runs past its deadline."""

    def __init__(self, segment_id: str, timeout_seconds: float):
        self.segment_id = segment_id
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Transcription of segment '{segment_id}' exceeded {timeout_seconds}s"
        )


class CallbackDeliveryError(Exception):
    """Raised when reporting a result back to the owning service fails."""

    def __init__(self, url: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to report transcription result to '{url}'")


class EventPublishError(Exception):
    """Raised when publishing an event to the message broker fails."""

    def __init__(self, routing_key: str, cause: Exception | None = None):
        self.routing_key = routing_key
        self.cause = cause
        super().__init__(f"Failed to publish event with routing key '{routing_key}'")


class SessionNotFoundError(Exception):
    """Raised when a requested session does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class NoSegmentsError(Exception):
    """Raised when a session has no audio segments to process."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} has no segments to process")


class SessionPersistenceError(Exception):
    """Raised when reading or writing session data fails."""

    def __init__(self, session_id: str, cause: Exception | None = None):
        self.session_id = session_id
        self.cause = cause
        super().__init__(f"Failed to persist session '{session_id}'")


class TrackerError(Exception):
    """Raised when the durable completion tracker cannot be updated."""

    def __init__(self, session_id: str, operation: str, cause: Exception | None = None):
        self.session_id = session_id
        self.operation = operation
        self.cause = cause
        super().__init__(f"Tracker {operation} failed for session '{session_id}'")
