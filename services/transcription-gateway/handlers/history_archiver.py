"""History store implementations: object storage plus a records table."""

from voicescribe_common.exceptions import StorageDeleteError, StorageUploadError
from voicescribe_common.infrastructure import StorageClient
from voicescribe_common.logging import setup_logging
from voicescribe_common.upload_policy import mime_type_from_filename

from domain import StoredRecord, archive_object_name
from exceptions import (
    ArchiveUploadError,
    AudioFileNotFoundError,
    RecordPersistenceError,
)
from infrastructure import LocalUploadStore
from infrastructure.interfaces import HistoryStore
from repositories import TranscriptionRepository

logger = setup_logging()


class HistoryArchiver(HistoryStore):
    """Archives uploads to object storage and records them in the database."""

    def __init__(
        self,
        storage: StorageClient,
        repository: TranscriptionRepository,
        uploads: LocalUploadStore,
        bucket_name: str,
    ):
        self._storage = storage
        self._repository = repository
        self._uploads = uploads
        self._bucket_name = bucket_name

    @property
    def is_configured(self) -> bool:
        return True

    def prepare(self) -> None:
        self._storage.ensure_bucket_exists(self._bucket_name)
        self._repository.init_schema()

    def archive(self, filename: str, transcript: str, user_id: str) -> StoredRecord:
        """
        Uploads the temp file, inserts its record, then removes the temp file.

        If the insert fails the uploaded object is deleted again so no
        unreferenced audio is left in the bucket.

        Raises:
            AudioFileNotFoundError: If the temp file no longer exists.
            ArchiveUploadError: If the object upload fails.
            RecordPersistenceError: If the record insert fails.
        """
        path = self._uploads.path_for(filename)
        if not path.exists():
            raise AudioFileNotFoundError(str(path))

        object_name = archive_object_name(user_id, filename)
        try:
            with path.open("rb") as data:
                self._storage.upload(
                    bucket_name=self._bucket_name,
                    object_name=object_name,
                    data=data,
                    size=path.stat().st_size,
                    content_type=mime_type_from_filename(filename),
                )
        except StorageUploadError as e:
            raise ArchiveUploadError(object_name, cause=e) from e

        audio_url = self._storage.public_url(self._bucket_name, object_name)

        try:
            record = self._repository.insert(
                filename=filename,
                transcription=transcript,
                user_id=user_id,
                audio_url=audio_url,
            )
        except RecordPersistenceError:
            self._remove_orphan(object_name)
            raise

        self._uploads.discard(filename)
        logger.info(
            "Transcription archived",
            extra={"record_id": record.id, "object_name": object_name},
        )
        return record

    def list(self, user_id: str, limit: int = 10) -> list[StoredRecord]:
        records = self._repository.list_for_user(user_id, limit)
        logger.info(
            "History fetched", extra={"user_id": user_id, "count": len(records)}
        )
        return records

    def _remove_orphan(self, object_name: str) -> None:
        try:
            self._storage.delete(self._bucket_name, object_name)
        except StorageDeleteError:
            logger.warning(
                "Orphaned archive object left in storage",
                extra={"object_name": object_name},
            )


class DisabledHistoryStore(HistoryStore):
    """Stand-in used when storage credentials are absent."""

    @property
    def is_configured(self) -> bool:
        return False

    def prepare(self) -> None:
        logger.info("History store not configured, archiving disabled")

    def archive(self, filename: str, transcript: str, user_id: str) -> None:
        return None

    def list(self, user_id: str, limit: int = 10) -> list[StoredRecord]:
        return []
