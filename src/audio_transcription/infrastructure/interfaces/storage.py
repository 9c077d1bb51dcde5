"""Abstract interface for object storage operations."""

from abc import ABC, abstractmethod


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def generate_presigned_url(
        self, bucket_name: str, object_name: str, ttl_seconds: int
    ) -> str:
        """
        Issues a time-limited URL allowing an untrusted party to GET an object.

        Args:
            bucket_name: The storage bucket name.
            object_name: The object path/name in storage.
            ttl_seconds: How long the URL stays valid.

        Returns:
            The pre-signed URL.

        Raises:
            PresignedURLError: If the object is missing, access is denied,
                or signing fails.
        """

    @abstractmethod
    def upload_text(self, bucket_name: str, object_name: str, content: str) -> None:
        """
        Writes text content as a new or replaced object.

        Args:
            bucket_name: The storage bucket name.
            object_name: The destination path/name in storage.
            content: The text to store (UTF-8 encoded).

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def ensure_bucket_exists(self, bucket_name: str) -> None:
        """
        Ensures a bucket exists, creating it if necessary.

        Args:
            bucket_name: The bucket name to ensure exists.
        """
