"""Health API routes."""

import logging
from collections.abc import Sequence

from litestar import Controller, get

from src.api.schemas import HealthResponse
from src.api.services.storage import BucketConnector

logger = logging.getLogger(__name__)


class HealthController(Controller):
    """Health check endpoints."""

    path = "/health"
    tags: Sequence[str] | None = ["Health"]

    @get("/", sync_to_thread=True)
    def health_check(
        self,
        bucket_connector: BucketConnector,
    ) -> HealthResponse:
        """Check API and bucket connectivity.

        Returns health status of the service and its storage bucket.
        """
        reachable = bucket_connector.health_check()
        if not reachable:
            logger.warning(f"Bucket {bucket_connector.bucket_name} is not reachable")

        return HealthResponse(
            status="healthy" if reachable else "unhealthy",
            state=bucket_connector.state,
            bucket=bucket_connector.bucket_name,
            bucket_reachable=reachable,
        )
