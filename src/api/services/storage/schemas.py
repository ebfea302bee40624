"""Storage service DTOs using msgspec."""

from __future__ import annotations

from enum import Enum

import msgspec


class ConnectorState(str, Enum):
    """Lifecycle state of a bucket connector."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class UploadRequest(msgspec.Struct, kw_only=True):
    """Request to upload a base64 encoded file.

    An empty or null ``file_name`` means a random UUID is used as the object name.
    """

    category: str
    raw_data: str = msgspec.field(name="rowData")
    file_name: str | None = None


class WriteResult(msgspec.Struct, kw_only=True):
    """Result of a successful object write."""

    bucket: str
    path: str  # Object name inside the bucket: {category}/{name}
    url: str  # Public URL: https://{bucket}/{path}
    size_bytes: int
