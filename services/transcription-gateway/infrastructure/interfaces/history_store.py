"""Abstract interface for the transcription history store."""

from abc import ABC, abstractmethod

from domain.models import StoredRecord


class HistoryStore(ABC):
    """Archives finished transcriptions and lists them per user."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether storage credentials are present."""

    @abstractmethod
    def prepare(self) -> None:
        """Creates the bucket and table if they do not exist yet."""

    @abstractmethod
    def archive(
        self, filename: str, transcript: str, user_id: str
    ) -> StoredRecord | None:
        """
        Archives the uploaded clip and inserts a transcription record.

        Args:
            filename: Name of the temporary upload in the upload directory.
            transcript: The transcript text to store.
            user_id: Free-text owner identifier.

        Returns:
            The stored record, or None when history is not configured.

        Raises:
            StorageError: If any archive step fails.
        """

    @abstractmethod
    def list(self, user_id: str, limit: int = 10) -> list[StoredRecord]:
        """
        Lists a user's records, most recent first.

        Raises:
            HistoryFetchError: If the records cannot be read.
        """
