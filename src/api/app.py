"""Litestar application factory and configuration."""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from google.api_core.exceptions import GoogleAPICallError
from litestar import Litestar, MediaType, Request, Response
from litestar.logging import LoggingConfig
from litestar.openapi import OpenAPIConfig
from litestar.openapi.spec import Contact, Server
from litestar.status_codes import HTTP_502_BAD_GATEWAY, HTTP_503_SERVICE_UNAVAILABLE

from src.api.dependencies import dependencies, init_services, shutdown_services
from src.api.routes import HealthController, StorageController
from src.api.services.storage import BucketConnector, StorageNotReadyError
from src.core.config import get_settings

logger = logging.getLogger(__name__)


def make_lifespan(
    connector: BucketConnector | None = None,
) -> Callable[[Litestar], AbstractAsyncContextManager[None]]:
    """Build the application lifespan manager.

    Opens the bucket connector on startup and closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:  # noqa: ARG001
        settings = get_settings()
        logger.info(f"Starting bucket service (scope={settings.bucket_scope})")

        init_services(settings, connector=connector)

        try:
            yield
        finally:
            logger.info("Shutting down bucket service")
            shutdown_services()

    return lifespan


def storage_not_ready_handler(_: Request, exc: StorageNotReadyError) -> Response:
    """Map an unavailable connector to 503."""
    return Response(
        content={"error": "Storage unavailable", "detail": str(exc)},
        status_code=HTTP_503_SERVICE_UNAVAILABLE,
        media_type=MediaType.JSON,
    )


def storage_backend_error_handler(_: Request, exc: GoogleAPICallError) -> Response:
    """Map an error returned by the storage API to 502."""
    logger.error(f"Storage backend error: {exc}")
    return Response(
        content={"error": "Storage backend error", "detail": exc.message},
        status_code=HTTP_502_BAD_GATEWAY,
        media_type=MediaType.JSON,
    )


def create_app(connector: BucketConnector | None = None) -> Litestar:
    # sourcery skip: inline-immediately-returned-variable
    """Create and configure Litestar application.

    Args:
        connector: Pre-built bucket connector. Built from settings if omitted.

    Returns:
        Configured Litestar application instance.
    """
    settings = get_settings()

    # Logging configuration
    logging_config = LoggingConfig(
        root={
            "level": "DEBUG" if settings.debug else "INFO",
            "handlers": ["console"],
        },
        formatters={
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        handlers={
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
        },
        loggers={
            "src": {
                "level": "DEBUG" if settings.debug else "INFO",
                "propagate": True,
            },
            "google": {
                "level": "WARNING",
                "propagate": False,
            },
            "urllib3": {
                "level": "WARNING",
                "propagate": False,
            },
        },
    )

    # OpenAPI documentation configuration
    openapi_config = OpenAPIConfig(
        title="Bucket Connector API",
        version="0.1.0",
        description="Public object uploads and prefix deletion on Google Cloud Storage",
        contact=Contact(name="API Support"),
        servers=[
            Server(
                url=f"http://{settings.api_host}:{settings.api_port}",
                description="Local development server",
            ),
        ],
        path="/docs",
    )

    app = Litestar(
        route_handlers=[
            HealthController,
            StorageController,
        ],
        dependencies=dependencies,
        lifespan=[make_lifespan(connector)],
        exception_handlers={
            StorageNotReadyError: storage_not_ready_handler,
            GoogleAPICallError: storage_backend_error_handler,
        },
        logging_config=logging_config,
        openapi_config=openapi_config,
        debug=settings.debug,
    )

    return app

