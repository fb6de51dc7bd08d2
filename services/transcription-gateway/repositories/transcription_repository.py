"""Repository for transcription records."""

from datetime import datetime

from sqlalchemy import desc
from sqlmodel import SQLModel, select
from voicescribe_common.db_models import TranscriptionRecord
from voicescribe_common.logging import setup_logging

from domain.models import StoredRecord
from exceptions import HistoryFetchError, RecordPersistenceError

logger = setup_logging()


class TranscriptionRepository:
    """
    Handles database operations for transcription records.

    Records are append-only: this class inserts and reads, it never updates
    or deletes a row.
    """

    def __init__(self, session_factory, engine=None):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
            engine: Engine used to create the table on startup.
        """
        self._session_factory = session_factory
        self._engine = engine

    def init_schema(self) -> None:
        """Creates the transcriptions table if it is missing."""
        if self._engine is not None:
            SQLModel.metadata.create_all(
                self._engine, tables=[TranscriptionRecord.__table__]
            )

    def insert(
        self,
        filename: str,
        transcription: str,
        user_id: str,
        audio_url: str,
        created_at: datetime | None = None,
    ) -> StoredRecord:
        """
        Inserts one transcription record.

        Raises:
            RecordPersistenceError: If the insert fails.
        """
        record = TranscriptionRecord(
            filename=filename,
            transcription=transcription,
            user_id=user_id,
            audio_url=audio_url,
        )
        if created_at is not None:
            record.created_at = created_at

        try:
            with self._session_factory() as db_session:
                db_session.add(record)
                db_session.commit()
                db_session.refresh(record)
                stored = self._to_domain(record)
        except Exception as e:
            logger.exception(
                "Failed to insert transcription record",
                extra={"file_name": filename, "user_id": user_id},
            )
            raise RecordPersistenceError(filename, cause=e) from e

        logger.info(
            "Transcription record inserted",
            extra={"record_id": stored.id, "user_id": user_id},
        )
        return stored

    def list_for_user(self, user_id: str, limit: int = 10) -> list[StoredRecord]:
        """
        Returns a user's records, newest first, at most ``limit`` of them.

        Raises:
            HistoryFetchError: If the query fails.
        """
        statement = (
            select(TranscriptionRecord)
            .where(TranscriptionRecord.user_id == user_id)
            .order_by(desc(TranscriptionRecord.created_at), desc(TranscriptionRecord.id))
            .limit(limit)
        )
        try:
            with self._session_factory() as db_session:
                return [self._to_domain(r) for r in db_session.exec(statement).all()]
        except Exception as e:
            logger.exception(
                "Failed to fetch transcription history", extra={"user_id": user_id}
            )
            raise HistoryFetchError(user_id, cause=e) from e

    @staticmethod
    def _to_domain(record: TranscriptionRecord) -> StoredRecord:
        return StoredRecord(
            id=record.id,
            filename=record.filename,
            transcription=record.transcription,
            user_id=record.user_id,
            audio_url=record.audio_url,
            created_at=record.created_at,
        )
