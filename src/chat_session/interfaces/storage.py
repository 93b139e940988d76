"""Abstract interface for object storage of recordings and attachments."""

from abc import ABC, abstractmethod
from typing import BinaryIO


class StorageClient(ABC):
    """Abstract base class for file storage backends bound to one bucket."""

    @abstractmethod
    def download(self, object_name: str) -> bytes:
        """
        Downloads a file from storage.

        Args:
            object_name: The object path/name in storage.

        Returns:
            The file contents as bytes.

        Raises:
            StorageDownloadError: If the download fails.
        """

    @abstractmethod
    def upload(
        self,
        object_name: str,
        data: BinaryIO,
        size: int | None,
        content_type: str,
    ) -> None:
        """
        Uploads a file to storage.

        Args:
            object_name: The destination path/name in storage.
            data: File-like object containing the data.
            size: Size of the file in bytes, or None when unknown.
            content_type: MIME type of the file.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def ensure_bucket_exists(self) -> None:
        """Ensures the bucket exists, creating it if necessary."""
