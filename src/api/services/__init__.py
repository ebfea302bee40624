"""API services module."""

from .storage import (
    BucketConnector,
    StorageConnectionError,
    StorageError,
    StorageNotReadyError,
    StorageValidationError,
)

__all__ = [
    "BucketConnector",
    "StorageConnectionError",
    "StorageError",
    "StorageNotReadyError",
    "StorageValidationError",
]
