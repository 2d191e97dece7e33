"""
Object store provisioning from application settings.

Callers that have a Settings instance (scripts, application wiring) get
their adapter here instead of assembling configuration themselves.

In mock mode, the same adapter is reused across calls so that objects
persist for the lifetime of the process.
"""

import logging
from typing import Optional

from .config.settings import Settings, build_store_configuration, get_settings
from .infrastructure.storage.client import S3ObjectStore, create_object_store

logger = logging.getLogger(__name__)

# Shared mock instance (persists across calls for local development)
_mock_object_store: Optional[S3ObjectStore] = None


def get_object_store(settings: Optional[Settings] = None) -> S3ObjectStore:
    """
    Provide an object store adapter for the given settings.
    
    Falls back to the cached process settings when none are passed.
    
    Raises:
        StorageConfigurationError: If credentials are missing outside mock mode
    """
    global _mock_object_store
    
    settings = settings or get_settings()
    
    if settings.s3_mock_mode:
        if _mock_object_store is None:
            _mock_object_store = create_object_store(
                mock_mode=True,
                max_listing_pages=settings.s3_max_listing_pages,
            )
            logger.info("Created shared mock object store")
        logger.debug("Using shared mock object store")
        return _mock_object_store
    
    config = build_store_configuration(settings)
    store = create_object_store(
        config=config,
        max_listing_pages=settings.s3_max_listing_pages,
    )
    logger.debug("Created S3 object store", extra={"region": config.region})
    
    return store


def reset_mock_object_store() -> None:
    """Drop the shared mock adapter. Intended for tests."""
    global _mock_object_store
    _mock_object_store = None
