"""MinIO implementation of the StorageClient interface."""

import io
from datetime import timedelta

from minio import Minio

from audio_transcription.exceptions import PresignedURLError, StorageUploadError
from audio_transcription.logging import setup_logging

from .interfaces import StorageClient

logger = setup_logging()

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class MinioStorageClient(StorageClient):
    """Handles object storage operations using MinIO."""

    def __init__(self, client: Minio):
        self._client = client

    def generate_presigned_url(
        self, bucket_name: str, object_name: str, ttl_seconds: int
    ) -> str:
        # Signing alone does not touch the server, so stat first to surface
        # missing objects and denied access here rather than at the API.
        try:
            self._client.stat_object(bucket_name=bucket_name, object_name=object_name)
            url = self._client.presigned_get_object(
                bucket_name=bucket_name,
                object_name=object_name,
                expires=timedelta(seconds=ttl_seconds),
            )
            logger.info(
                "Pre-signed URL generated",
                extra={
                    "bucket_name": bucket_name,
                    "object_name": object_name,
                    "ttl_seconds": ttl_seconds,
                },
            )
            return url
        except Exception as e:
            logger.exception(
                "MinIO pre-signed URL generation failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise PresignedURLError(object_name, e) from e

    def upload_text(self, bucket_name: str, object_name: str, content: str) -> None:
        data = content.encode("utf-8")
        try:
            self._client.put_object(
                bucket_name=bucket_name,
                object_name=object_name,
                data=io.BytesIO(data),
                length=len(data),
                content_type=TEXT_CONTENT_TYPE,
            )
            logger.info(
                "Text uploaded to MinIO",
                extra={
                    "bucket_name": bucket_name,
                    "object_name": object_name,
                    "size": len(data),
                },
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        if not self._client.bucket_exists(bucket_name=bucket_name):
            self._client.make_bucket(bucket_name=bucket_name)
            logger.info("Bucket created", extra={"bucket_name": bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": bucket_name})
