"""Storage API routes.

Provides endpoints for uploading public objects and deleting objects
or whole prefixes from the configured bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import msgspec
from litestar import Controller, Request, Response, delete, post, put
from litestar.concurrency import sync_to_thread
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
)

from src.api.services.storage import (
    BucketConnector,
    StorageValidationError,
    UploadRequest,
    WriteResult,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Response schemas
# -----------------------------------------------------------------------------


class PrefixDeleteResponse(msgspec.Struct, kw_only=True):
    """Response for a prefix deletion."""

    prefix: str
    deleted: int


class ErrorResponse(msgspec.Struct, kw_only=True):
    """Error response."""

    error: str
    detail: str | None = None


# -----------------------------------------------------------------------------
# Controller
# -----------------------------------------------------------------------------


class StorageController(Controller):
    """Bucket storage endpoints.

    Every written object is publicly readable at the returned URL.
    """

    path = "/api/v1/storage"
    tags: Sequence[str] | None = ["Storage"]

    @post("/upload", sync_to_thread=True)
    def upload(
        self,
        data: UploadRequest,
        bucket_connector: BucketConnector,
    ) -> Response[WriteResult | ErrorResponse]:
        """Upload a base64 encoded file under ``{category}/{file_name}``.

        A random UUID is used when ``file_name`` is empty.
        """
        try:
            result = bucket_connector.store_encoded(data)
        except StorageValidationError as e:
            logger.warning(f"Rejected upload for category {data.category!r}: {e}")
            return Response(
                content=ErrorResponse(error="Invalid payload", detail=str(e)),
                status_code=HTTP_400_BAD_REQUEST,
            )

        return Response(content=result, status_code=HTTP_201_CREATED)

    @put("/objects/{object_path:path}")
    async def write_object(
        self,
        request: Request,
        object_path: str,
        bucket_connector: BucketConnector,
    ) -> Response[WriteResult]:
        """Upload the raw request body to an explicit object path.

        The body is stored as-is whatever its content type.
        """
        content = await request.body()
        result = await sync_to_thread(bucket_connector.store_raw, object_path.lstrip("/"), content)
        return Response(content=result, status_code=HTTP_201_CREATED)

    @delete("/objects/{object_path:path}", sync_to_thread=True)
    def delete_object(
        self,
        object_path: str,
        bucket_connector: BucketConnector,
    ) -> None:
        """Delete one object. Succeeds when the object is already gone."""
        bucket_connector.delete_object(object_path.lstrip("/"))

    @delete("/prefixes/{prefix:path}", status_code=HTTP_200_OK, sync_to_thread=True)
    def delete_prefix(
        self,
        prefix: str,
        bucket_connector: BucketConnector,
    ) -> PrefixDeleteResponse:
        """Delete every object whose name starts with the prefix."""
        prefix = prefix.lstrip("/")
        deleted = bucket_connector.delete_objects_with_prefix(prefix)
        return PrefixDeleteResponse(prefix=prefix, deleted=deleted)
