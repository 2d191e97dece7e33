"""
Object storage integration.

Supports AWS S3 and S3-compatible providers via boto3.
Includes an in-memory handle for local development without credentials.
"""

from .client import (
    DEFAULT_MAX_LISTING_PAGES,
    S3ObjectStore,
    create_object_store,
    create_object_store_async,
)
from .connection import StoreConfiguration, create_s3_client
from .errors import (
    BulkDeleteError,
    PaginationError,
    RemoteRequestError,
    StorageConfigurationError,
    StorageError,
    TransientNetworkError,
)
from .memory import InMemoryS3Client
from .models import (
    DEFAULT_PRESIGN_EXPIRY_SECONDS,
    BucketListing,
    BucketSummary,
    BulkDeleteResult,
    ListingPage,
    OwnerInfo,
    PresignedUrlRequest,
)

__all__ = [
    "DEFAULT_MAX_LISTING_PAGES",
    "DEFAULT_PRESIGN_EXPIRY_SECONDS",
    "BucketListing",
    "BucketSummary",
    "BulkDeleteError",
    "BulkDeleteResult",
    "InMemoryS3Client",
    "ListingPage",
    "OwnerInfo",
    "PaginationError",
    "PresignedUrlRequest",
    "RemoteRequestError",
    "S3ObjectStore",
    "StorageConfigurationError",
    "StorageError",
    "StoreConfiguration",
    "TransientNetworkError",
    "create_object_store",
    "create_object_store_async",
    "create_s3_client",
]
