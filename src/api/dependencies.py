"""Dependency injection providers for Litestar."""

from __future__ import annotations

import logging

from litestar.di import Provide

from src.api.services.storage import BucketConnector, StorageNotReadyError
from src.core.config import BucketSettings, Settings, get_settings

logger = logging.getLogger(__name__)

# Global singleton instances (created at app startup)
_bucket_connector: BucketConnector | None = None


# -----------------------------------------------------------------------------
# Storage dependencies
# -----------------------------------------------------------------------------


def get_bucket_connector() -> BucketConnector:
    """Provide bucket connector instance.

    Returns:
        Singleton bucket connector.

    Raises:
        StorageNotReadyError: If connector not initialized.
    """
    if _bucket_connector is None:
        raise StorageNotReadyError("Bucket connector not initialized")
    return _bucket_connector


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------


def provide_settings() -> Settings:
    """Provide settings instance.

    Returns:
        Application settings.
    """
    return get_settings()


# -----------------------------------------------------------------------------
# Lifecycle management
# -----------------------------------------------------------------------------


def init_services(
    settings: Settings,
    *,
    connector: BucketConnector | None = None,
) -> BucketConnector:
    """Initialize all service singletons.

    Called during application startup. A failure to open the connector
    propagates and aborts startup.

    Args:
        settings: Application settings.
        connector: Pre-built connector (tests). Built from settings if omitted.
    """
    global _bucket_connector

    if connector is None:
        scope = settings.bucket_scope
        connector = BucketConnector(
            scope,
            settings=BucketSettings.for_scope(scope),
            logger=logging.getLogger("src.storage").getChild(scope),
        )

    connector.open()
    _bucket_connector = connector
    logger.info(f"Bucket connector initialized for bucket: {connector.bucket_name}")

    return connector


def shutdown_services() -> None:
    """Cleanup service resources.

    Called during application shutdown.
    """
    global _bucket_connector

    if _bucket_connector is not None:
        connector = _bucket_connector
        _bucket_connector = None
        connector.close()
        logger.info("Bucket connector closed")


# Dependency providers for Litestar
dependencies = {
    "settings": Provide(provide_settings, sync_to_thread=False),
    "bucket_connector": Provide(get_bucket_connector, sync_to_thread=False),
}
