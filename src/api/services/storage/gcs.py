"""Google Cloud Storage bucket connector."""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from urllib.parse import quote
from uuid import uuid4

from google.api_core.exceptions import NotFound
from google.cloud import storage

from src.core.config import BucketSettings

from .exceptions import StorageConnectionError, StorageNotReadyError, StorageValidationError
from .schemas import ConnectorState, UploadRequest, WriteResult

# Grants READER to allUsers on the written object
PUBLIC_READ_ACL = "publicRead"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Characters kept unescaped in URL path segments besides unreserved ones
_PATH_SAFE = "/$&+,:;=@"


class BucketConnector:
    """Lifecycle-managed wrapper around a GCS client bound to one bucket.

    The connector is created once when the application is wired, opened
    before any operation is issued and closed exactly once on shutdown.
    Every operation raises ``StorageNotReadyError`` outside of that window.

    Remote errors from the SDK are logged and re-raised unchanged, except
    ``NotFound`` on deletes which is treated as success.
    """

    def __init__(
        self,
        scope: str,
        *,
        settings: BucketSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the connector.

        Args:
            scope: Namespace for configuration keys (``<scope>.bucket_name``).
            settings: Resolved settings. Read from the environment if omitted.
            logger: Logger to use. Defaults to a child logger named after scope.
        """
        self._scope = scope
        self._settings = settings if settings is not None else BucketSettings.for_scope(scope)
        self._logger = logger or logging.getLogger(__name__).getChild(scope)
        self._client: storage.Client | None = None
        self._state = ConnectorState.UNINITIALIZED

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def settings(self) -> BucketSettings:
        return self._settings

    @property
    def bucket_name(self) -> str:
        return self._settings.bucket_name

    @property
    def state(self) -> ConnectorState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == ConnectorState.READY

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self) -> None:
        """Create the storage client from the service account key file.

        Raises:
            StorageConnectionError: If the client cannot be constructed.
            StorageNotReadyError: If the connector was already closed.
        """
        if self._state == ConnectorState.READY:
            return
        if self._state == ConnectorState.CLOSED:
            raise StorageNotReadyError(f"Bucket connector '{self._scope}' is closed")

        json_key = self._settings.json_key
        self._logger.info(
            f"Starting bucket connector: "
            f"{BucketSettings.config_key(self._scope, 'bucket_name')}={self.bucket_name}, "
            f"{BucketSettings.config_key(self._scope, 'json_key')}={json_key}"
        )

        try:
            self._client = storage.Client.from_service_account_json(json_key)
        except Exception as e:
            self._logger.error(f"Failed to create storage client from {json_key}: {e}")
            raise StorageConnectionError(
                f"Failed to create storage client: {e}",
                cause=e,
            ) from e

        self._state = ConnectorState.READY

    def close(self) -> None:
        """Close the storage client.

        Raises:
            StorageNotReadyError: If the connector is not open.
        """
        client = self.client
        self._client = None
        self._state = ConnectorState.CLOSED
        self._logger.info("Stopped bucket connector")
        client.close()

    @property
    def client(self) -> storage.Client:
        """Get the storage client, raising if not open."""
        if self._state != ConnectorState.READY or self._client is None:
            raise StorageNotReadyError(
                f"Bucket connector '{self._scope}' is {self._state.value}. "
                "Call open() first."
            )
        return self._client

    def get_client(self) -> storage.Client:
        """Expose the underlying client for direct access."""
        return self.client

    def get_bucket(self) -> storage.Bucket:
        """Get a handle to the configured bucket (no API call)."""
        return self.client.bucket(self.bucket_name)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def build_object_path(self, req: UploadRequest) -> str:
        """Build the object path for an upload: ``{category}/{name}``."""
        name = req.file_name or str(uuid4())
        return f"{req.category}/{name}"

    def public_url(self, path: str) -> str:
        """Public URL of an object in the configured bucket."""
        return f"https://{quote(f'{self.bucket_name}/{path}', safe=_PATH_SAFE)}"

    def upload_encoded(self, req: UploadRequest) -> str:
        """Decode a base64 payload and upload it as a public object.

        Returns:
            Public URL of the written object.

        Raises:
            StorageValidationError: If ``raw_data`` is not valid base64.
        """
        return self.store_encoded(req).url

    def write_raw(self, path: str, content: bytes) -> str:
        """Upload bytes to ``path`` as a public object.

        Returns:
            Public URL of the written object.
        """
        return self.store_raw(path, content).url

    def store_encoded(self, req: UploadRequest) -> WriteResult:
        """Same as ``upload_encoded`` but returns the full write result."""
        content = _decode_base64(req.raw_data)
        return self.store_raw(self.build_object_path(req), content)

    def store_raw(self, path: str, content: bytes) -> WriteResult:
        """Same as ``write_raw`` but returns the full write result."""
        blob = self.get_bucket().blob(path)
        content_type = mimetypes.guess_type(path)[0] or DEFAULT_CONTENT_TYPE

        try:
            blob.upload_from_string(
                content,
                content_type=content_type,
                predefined_acl=PUBLIC_READ_ACL,
                timeout=self._settings.request_timeout,
            )
        except Exception as e:
            self._logger.error(f"Upload failed for {self.bucket_name}/{path}: {e}")
            raise

        url = self.public_url(path)
        self._logger.info(f"Uploaded object: {path} ({len(content)} bytes)")

        return WriteResult(
            bucket=self.bucket_name,
            path=path,
            url=url,
            size_bytes=len(content),
        )

    # -------------------------------------------------------------------------
    # Deletes
    # -------------------------------------------------------------------------

    def delete_object(self, path: str) -> None:
        """Delete one object. A missing object is not an error."""
        try:
            self.get_bucket().blob(path).delete(timeout=self._settings.request_timeout)
        except NotFound:
            self._logger.debug(f"Object already absent: {path}")
            return
        except Exception as e:
            self._logger.error(f"Delete failed for {self.bucket_name}/{path}: {e}")
            raise

        self._logger.info(f"Deleted object: {path}")

    def delete_objects_with_prefix(self, prefix: str) -> int:
        """Delete every object whose name starts with ``prefix``.

        Objects are deleted in listing order. Objects that vanish in between
        are skipped; any other error stops the loop and is re-raised, leaving
        the remaining objects in place.

        Returns:
            Number of objects deleted.
        """
        client = self.client
        timeout = self._settings.request_timeout
        deleted = 0

        try:
            for blob in client.list_blobs(self.bucket_name, prefix=prefix, timeout=timeout):
                try:
                    blob.delete(timeout=timeout)
                except NotFound:
                    self._logger.debug(f"Object already absent: {blob.name}")
                    continue
                deleted += 1
        except Exception as e:
            self._logger.error(
                f"Prefix delete failed for {self.bucket_name}/{prefix} "
                f"after {deleted} objects: {e}"
            )
            raise

        self._logger.info(f"Deleted {deleted} objects under prefix: {prefix}")
        return deleted

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def health_check(self) -> bool:
        """Check that the connector is open and the bucket is reachable."""
        if not self.is_ready:
            return False
        try:
            return bool(self.get_bucket().exists(timeout=self._settings.request_timeout))
        except Exception as e:
            self._logger.warning(f"Bucket health check failed: {e}")
            return False


def _decode_base64(raw_data: str) -> bytes:
    try:
        # Line breaks of wrapped (MIME/PEM style) payloads are ignored
        return base64.b64decode(raw_data.replace("\r", "").replace("\n", ""), validate=True)
    except (binascii.Error, ValueError) as e:
        raise StorageValidationError(f"Invalid base64 payload: {e}", cause=e) from e
