"""Abstract interface for object storage operations."""

from abc import ABC, abstractmethod
from typing import BinaryIO


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def upload(
        self,
        bucket_name: str,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str,
    ) -> None:
        """
        Uploads a file to storage, replacing any object with the same name.

        Args:
            bucket_name: The storage bucket name.
            object_name: The destination path/name in storage.
            data: File-like object containing the data.
            size: Size of the file in bytes.
            content_type: MIME type of the file.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def delete(self, bucket_name: str, object_name: str) -> None:
        """
        Removes an object from storage.

        Raises:
            StorageDeleteError: If the removal fails.
        """

    @abstractmethod
    def public_url(self, bucket_name: str, object_name: str) -> str:
        """Returns a publicly resolvable URL for the object."""

    @abstractmethod
    def ensure_bucket_exists(self, bucket_name: str) -> None:
        """
        Ensures a bucket exists, creating it if necessary.

        Args:
            bucket_name: The bucket name to ensure exists.
        """
