"""Storage service protocol definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .schemas import ConnectorState, UploadRequest, WriteResult


@runtime_checkable
class StorageService(Protocol):
    """Protocol for bucket backends.

    Defines the contract used by the HTTP layer. Implementations own their
    client between ``open()`` and ``close()`` and raise
    ``StorageNotReadyError`` outside of that window.
    """

    @property
    def state(self) -> ConnectorState: ...

    @property
    def bucket_name(self) -> str: ...

    def open(self) -> None:
        """Acquire the storage client.

        Raises:
            StorageConnectionError: If the client cannot be created.
        """
        ...

    def close(self) -> None:
        """Release the storage client. Called once during shutdown."""
        ...

    def upload_encoded(self, req: UploadRequest) -> str:
        """Upload a base64 payload to ``{category}/{name}``.

        Args:
            req: Upload request with base64 data.

        Returns:
            Public URL of the stored object.

        Raises:
            StorageValidationError: If the payload is not valid base64.
        """
        ...

    def write_raw(self, path: str, content: bytes) -> str:
        """Upload bytes to an explicit object path.

        Args:
            path: Full object path inside the bucket.
            content: Raw bytes.

        Returns:
            Public URL of the stored object.
        """
        ...

    def store_encoded(self, req: UploadRequest) -> WriteResult:
        """Like ``upload_encoded`` but returns path and size as well."""
        ...

    def store_raw(self, path: str, content: bytes) -> WriteResult:
        """Like ``write_raw`` but returns path and size as well."""
        ...

    def delete_object(self, path: str) -> None:
        """Delete one object. Missing objects are ignored."""
        ...

    def delete_objects_with_prefix(self, prefix: str) -> int:
        """Delete all objects under a prefix.

        Returns:
            Number of objects deleted.
        """
        ...

    def health_check(self) -> bool:
        """Check if the bucket is reachable.

        Returns:
            True if storage is healthy, False otherwise.
        """
        ...
