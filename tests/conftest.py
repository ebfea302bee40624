"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from unittest.mock import patch

import pytest
from google.api_core.exceptions import NotFound

from src.api import dependencies
from src.api.services.storage import BucketConnector
from src.core.config import BucketSettings, reset_settings

CLIENT_FACTORY = "src.api.services.storage.gcs.storage.Client.from_service_account_json"


class FakeBlob:
    """In-memory stand-in for ``storage.Blob``."""

    def __init__(self, bucket: FakeBucket, name: str) -> None:
        self.bucket = bucket
        self.name = name

    def upload_from_string(self, data: bytes, **kwargs: Any) -> None:
        self.bucket.uploads.append((self.name, kwargs))
        self.bucket.objects[self.name] = bytes(data)

    def download_as_bytes(self, **_: Any) -> bytes:
        if self.name not in self.bucket.objects:
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        return self.bucket.objects[self.name]

    def delete(self, **_: Any) -> None:
        if self.name in self.bucket.delete_errors:
            raise self.bucket.delete_errors[self.name]
        if self.name not in self.bucket.objects:
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        del self.bucket.objects[self.name]
        self.bucket.deleted.append(self.name)


class FakeBucket:
    """In-memory stand-in for ``storage.Bucket``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.objects: dict[str, bytes] = {}
        self.uploads: list[tuple[str, dict[str, Any]]] = []
        self.deleted: list[str] = []
        # Names returned by listings but already gone when deleted
        self.ghosts: set[str] = set()
        self.delete_errors: dict[str, Exception] = {}
        self.reachable = True

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)

    def exists(self, **_: Any) -> bool:
        return self.reachable


class FakeStorageClient:
    """In-memory stand-in for ``storage.Client``."""

    def __init__(self) -> None:
        self.buckets: dict[str, FakeBucket] = {}
        self.closed = False

    def bucket(self, name: str) -> FakeBucket:
        return self.buckets.setdefault(name, FakeBucket(name))

    def list_blobs(self, bucket_name: str, *, prefix: str = "", **_: Any) -> Iterator[FakeBlob]:
        bucket = self.bucket(bucket_name)
        names = sorted(
            name for name in set(bucket.objects) | bucket.ghosts if name.startswith(prefix)
        )
        for name in names:
            yield FakeBlob(bucket, name)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from ambient settings and service singletons."""
    for name in ("MEDIA_BUCKET_NAME", "MEDIA_JSON_KEY", "MEDIA_REQUEST_TIMEOUT", "BUCKET_SCOPE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(dependencies, "_bucket_connector", None)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def bucket_settings() -> BucketSettings:
    """Provide test bucket settings."""
    return BucketSettings(
        bucket_name="test-bucket",
        json_key="test-key.json",
        request_timeout=5.0,
    )


@pytest.fixture
def fake_client() -> FakeStorageClient:
    """Provide an empty in-memory storage client."""
    return FakeStorageClient()


@pytest.fixture
def fake_bucket(fake_client: FakeStorageClient) -> FakeBucket:
    """Provide the bucket the test connector writes to."""
    return fake_client.bucket("test-bucket")


@pytest.fixture
def patched_client_factory(fake_client: FakeStorageClient) -> Iterator[Any]:
    """Make client construction return the in-memory client."""
    with patch(CLIENT_FACTORY, return_value=fake_client) as factory:
        yield factory


@pytest.fixture
def unopened_connector(bucket_settings: BucketSettings) -> BucketConnector:
    """Provide a connector that has not been opened."""
    return BucketConnector("media", settings=bucket_settings)


@pytest.fixture
def connector(
    unopened_connector: BucketConnector,
    patched_client_factory: Any,
) -> BucketConnector:
    """Provide an opened connector backed by the in-memory client."""
    unopened_connector.open()
    return unopened_connector
