"""SQLModel implementation of the SessionStore interface."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from lecture_transcriber.db_models import AudioSegmentRecord, ParagraphRecord, SessionRecord
from lecture_transcriber.domain.models import AudioSegment, Paragraph, SessionStatus
from lecture_transcriber.exceptions import SessionNotFoundError, SessionPersistenceError
from lecture_transcriber.interfaces import SessionStore

logger = logging.getLogger(__name__)


class SqlSessionStore(SessionStore):
    """
    Handles database operations for sessions, segments and paragraphs.

    Encapsulates SQL queries and transaction management,
    keeping the handler layer free of database concerns.
    """

    def __init__(self, session_factory):
        """
        Initializes the store.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    def load_session_segments(self, session_id: str) -> list[AudioSegment]:
        with self._session_factory() as db_session:
            if db_session.get(SessionRecord, session_id) is None:
                raise SessionNotFoundError(session_id)
            statement = (
                select(AudioSegmentRecord)
                .where(AudioSegmentRecord.session_id == session_id)
                .order_by(AudioSegmentRecord.created_at, AudioSegmentRecord.id)
            )
            return [self._to_segment(r) for r in db_session.exec(statement).all()]

    def append_paragraphs(
        self, session_id: str, segment_id: str, paragraphs: list[Paragraph]
    ) -> None:
        try:
            with self._session_factory() as db_session:
                existing = db_session.exec(
                    select(ParagraphRecord).where(ParagraphRecord.segment_id == segment_id)
                ).all()
                for record in existing:
                    db_session.delete(record)
                db_session.flush()

                for position, paragraph in enumerate(paragraphs):
                    db_session.add(
                        ParagraphRecord(
                            id=paragraph.id,
                            session_id=session_id,
                            segment_id=segment_id,
                            position=position,
                            text=paragraph.text,
                            start_ms=paragraph.start_ms,
                            end_ms=paragraph.end_ms,
                        )
                    )
                db_session.commit()
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to persist paragraphs",
                extra={"session_id": session_id, "segment_id": segment_id},
            )
            raise SessionPersistenceError(session_id, cause=e) from e

        logger.info(
            "Paragraphs persisted",
            extra={
                "session_id": session_id,
                "segment_id": segment_id,
                "paragraph_count": len(paragraphs),
                "replaced": len(existing),
            },
        )

    def mark_session_status(self, session_id: str, status: SessionStatus) -> None:
        try:
            with self._session_factory() as db_session:
                record = db_session.get(SessionRecord, session_id)
                if record is None:
                    logger.warning(
                        "Status update for unknown session ignored",
                        extra={"session_id": session_id, "status": status},
                    )
                    return
                record.status = status
                db_session.add(record)
                db_session.commit()
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to update session status",
                extra={"session_id": session_id, "status": status},
            )
            raise SessionPersistenceError(session_id, cause=e) from e

        logger.info(
            "Session status updated", extra={"session_id": session_id, "status": status}
        )

    def get_session_status(self, session_id: str) -> SessionStatus:
        with self._session_factory() as db_session:
            record = db_session.get(SessionRecord, session_id)
            if record is None:
                raise SessionNotFoundError(session_id)
            return record.status

    def get_paragraphs(self, session_id: str) -> list[Paragraph]:
        with self._session_factory() as db_session:
            statement = (
                select(ParagraphRecord)
                .join(AudioSegmentRecord, ParagraphRecord.segment_id == AudioSegmentRecord.id)
                .where(ParagraphRecord.session_id == session_id)
                .order_by(
                    AudioSegmentRecord.created_at,
                    AudioSegmentRecord.id,
                    ParagraphRecord.position,
                )
            )
            return [
                Paragraph(id=r.id, text=r.text, start_ms=r.start_ms, end_ms=r.end_ms)
                for r in db_session.exec(statement).all()
            ]

    @staticmethod
    def _to_segment(record: AudioSegmentRecord) -> AudioSegment:
        return AudioSegment(
            id=record.id,
            session_id=record.session_id,
            storage_path=record.storage_path,
            created_at=record.created_at,
        )
