"""Tests for chat_session.infrastructure.minio_storage."""

import io
from unittest.mock import MagicMock

import pytest

from chat_session.exceptions import StorageDownloadError, StorageUploadError
from chat_session.infrastructure import MinioStorageClient


@pytest.fixture
def minio_client():
    return MagicMock()


@pytest.fixture
def storage(minio_client):
    return MinioStorageClient(minio_client, "conversations")


class TestDownload:
    def test_returns_data_and_releases_connection(self, storage, minio_client):
        response = MagicMock(data=b"audio")
        minio_client.get_object.return_value = response

        assert storage.download("conv/voice/a.m4a") == b"audio"
        minio_client.get_object.assert_called_once_with("conversations", "conv/voice/a.m4a")
        response.close.assert_called_once_with()
        response.release_conn.assert_called_once_with()

    def test_failure_wrapped(self, storage, minio_client):
        minio_client.get_object.side_effect = RuntimeError("no such key")

        with pytest.raises(StorageDownloadError) as exc_info:
            storage.download("missing")

        assert exc_info.value.object_name == "missing"


class TestUpload:
    def test_known_size(self, storage, minio_client):
        data = io.BytesIO(b"abc")

        storage.upload("conv/files/x.pdf", data, 3, "application/pdf")

        minio_client.put_object.assert_called_once_with(
            bucket_name="conversations",
            object_name="conv/files/x.pdf",
            data=data,
            length=3,
            content_type="application/pdf",
        )

    def test_unknown_size_uses_multipart(self, storage, minio_client):
        storage.upload("conv/files/x.pdf", io.BytesIO(b"abc"), None, "application/pdf")

        kwargs = minio_client.put_object.call_args.kwargs
        assert kwargs["length"] == -1
        assert kwargs["part_size"] > 0

    def test_failure_wrapped(self, storage, minio_client):
        minio_client.put_object.side_effect = RuntimeError("disk full")

        with pytest.raises(StorageUploadError):
            storage.upload("x", io.BytesIO(b""), 0, "text/plain")


class TestEnsureBucket:
    def test_creates_missing_bucket(self, storage, minio_client):
        minio_client.bucket_exists.return_value = False

        storage.ensure_bucket_exists()

        minio_client.make_bucket.assert_called_once_with("conversations")

    def test_existing_bucket_left_alone(self, storage, minio_client):
        minio_client.bucket_exists.return_value = True

        storage.ensure_bucket_exists()

        minio_client.make_bucket.assert_not_called()
