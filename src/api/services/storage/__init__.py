"""Storage service module.

Provides public object storage operations backed by Google Cloud Storage.
"""

from .base import StorageService
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotReadyError,
    StorageValidationError,
)
from .gcs import BucketConnector
from .schemas import ConnectorState, UploadRequest, WriteResult

__all__ = [
    # Protocol
    "StorageService",
    # Implementation
    "BucketConnector",
    # Schemas
    "ConnectorState",
    "UploadRequest",
    "WriteResult",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    "StorageNotReadyError",
    "StorageValidationError",
]
