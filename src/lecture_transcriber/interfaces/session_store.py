"""Abstract interface for the durable session store."""

from abc import ABC, abstractmethod

from lecture_transcriber.domain.models import AudioSegment, Paragraph, SessionStatus


class SessionStore(ABC):
    """Owns durable session, segment and paragraph records."""

    @abstractmethod
    def load_session_segments(self, session_id: str) -> list[AudioSegment]:
        """
        Returns the session's audio segments ordered by creation time.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """

    @abstractmethod
    def append_paragraphs(
        self, session_id: str, segment_id: str, paragraphs: list[Paragraph]
    ) -> None:
        """
        Stores a segment's paragraphs, replacing any previously stored for it.

        Raises:
            SessionPersistenceError: If the write fails.
        """

    @abstractmethod
    def mark_session_status(self, session_id: str, status: SessionStatus) -> None:
        """Sets the session status. Unknown sessions are ignored."""

    @abstractmethod
    def get_session_status(self, session_id: str) -> SessionStatus:
        """
        Returns the current session status.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """

    @abstractmethod
    def get_paragraphs(self, session_id: str) -> list[Paragraph]:
        """Returns all paragraphs of a session, each segment's in timeline order."""
