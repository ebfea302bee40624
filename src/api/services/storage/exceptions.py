"""Storage service exceptions."""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StorageConnectionError(StorageError):
    """Raised when the storage client cannot be constructed."""


class StorageNotReadyError(StorageError):
    """Raised when the connector is used before open() or after close()."""


class StorageValidationError(StorageError):
    """Raised when an upload payload is malformed."""
