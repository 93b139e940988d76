"""MinIO implementation of the StorageClient interface."""

from typing import BinaryIO

from minio import Minio

from chat_session.exceptions import StorageDownloadError, StorageUploadError
from chat_session.interfaces import StorageClient
from chat_session.logging import setup_logging

logger = setup_logging(__name__)

# Multipart chunk size used when the upload length is unknown.
_UNKNOWN_SIZE_PART_SIZE = 10 * 1024 * 1024


class MinioStorageClient(StorageClient):
    """Stores voice recordings and attachments in a MinIO bucket."""

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self._bucket_name = bucket_name

    def download(self, object_name: str) -> bytes:
        try:
            response = self._client.get_object(self._bucket_name, object_name)
            try:
                data = response.data
            finally:
                response.close()
                response.release_conn()
            logger.info(
                "File downloaded from MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            return data
        except Exception as e:
            logger.exception(
                "MinIO download failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDownloadError(object_name, e) from e

    def upload(
        self,
        object_name: str,
        data: BinaryIO,
        size: int | None,
        content_type: str,
    ) -> None:
        try:
            if size is None:
                self._client.put_object(
                    bucket_name=self._bucket_name,
                    object_name=object_name,
                    data=data,
                    length=-1,
                    part_size=_UNKNOWN_SIZE_PART_SIZE,
                    content_type=content_type,
                )
            else:
                self._client.put_object(
                    bucket_name=self._bucket_name,
                    object_name=object_name,
                    data=data,
                    length=size,
                    content_type=content_type,
                )
            logger.info(
                "File uploaded to MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e

    def ensure_bucket_exists(self) -> None:
        if not self._client.bucket_exists(self._bucket_name):
            self._client.make_bucket(self._bucket_name)
            logger.info("Bucket created", extra={"bucket_name": self._bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": self._bucket_name})
