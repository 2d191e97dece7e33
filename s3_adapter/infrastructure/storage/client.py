"""
Object store adapter for S3-compatible storage.

Most operations are a single request/response round trip mapped
one-to-one onto the boto3 client. Two operations carry real logic:
- delete_all_objects walks the bucket with an explicit listing cursor
  and deletes each key in listing order
- create_presigned_url_with_client signs a time-limited GET capability

boto3 is synchronous, so every round trip runs in a worker thread.
Concurrent coroutines can share one adapter: the only shared state is
the read-only connection handle.
"""

import asyncio
import inspect
import logging
import time
from typing import IO, Any, Awaitable, Callable, Optional, Union

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)
from botocore.exceptions import ConnectionError as BotoConnectionError

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
    BulkDeleteResult,
    ListingPage,
    PresignedUrlRequest,
)

logger = logging.getLogger(__name__)

# At the service's default page size this is ten million objects.
DEFAULT_MAX_LISTING_PAGES = 10_000

SAMPLE_OBJECT_KEY = "my-first-object.txt"
SAMPLE_OBJECT_BODY = "Hello Python SDK !!!"

ObjectBody = Union[str, bytes, bytearray, IO[bytes]]


class S3ObjectStore:
    """
    Object store adapter over a boto3-compatible S3 client.
    
    The adapter exclusively owns its connection handle. Faults are never
    recovered locally: botocore errors are logged once and re-raised as
    the matching StorageError subclass with the original chained.
    """
    
    def __init__(
        self,
        config: Optional[StoreConfiguration] = None,
        client: Optional[Any] = None,
        max_listing_pages: Optional[int] = DEFAULT_MAX_LISTING_PAGES,
    ) -> None:
        """
        Build the adapter from a configuration, or around an existing handle.
        
        Args:
            config: Resolved region and credentials
            client: Pre-built boto3-compatible client (skips handle creation)
            max_listing_pages: Cap on pages walked by delete_all_objects,
                None for no cap
        """
        if client is None:
            if config is None:
                raise ValueError("config is required when no client is provided")
            client = create_s3_client(config)
        
        if max_listing_pages is not None and max_listing_pages < 1:
            raise ValueError("max_listing_pages must be positive")
        
        self._config = config
        self._client = client
        self._max_listing_pages = max_listing_pages
    
    def get_client(self) -> Any:
        """Return the underlying boto3 client for direct use."""
        return self._client
    
    @property
    def max_listing_pages(self) -> Optional[int]:
        return self._max_listing_pages
    
    # -----------------------------------------------------------------------
    # Buckets
    # -----------------------------------------------------------------------
    
    async def create_bucket(self, bucket_name: str) -> None:
        await self._call("CreateBucket", self._client.create_bucket, Bucket=bucket_name)
        logger.info("Created bucket", extra={"bucket": bucket_name})
    
    async def delete_bucket(self, bucket_name: str) -> None:
        """Delete a bucket. The service refuses if it still holds objects."""
        await self._call("DeleteBucket", self._client.delete_bucket, Bucket=bucket_name)
        logger.info("Deleted bucket", extra={"bucket": bucket_name})
    
    async def list_buckets(self) -> BucketListing:
        """
        List all buckets owned by the configured account.
        
        Missing owner or bucket names come back as "unknown" / "Unnamed".
        """
        response = await self._call("ListBuckets", self._client.list_buckets)
        listing = BucketListing.from_response(response)
        
        logger.debug(
            "Listed buckets",
            extra={"owner": listing.owner.name, "count": len(listing.buckets)}
        )
        
        return listing
    
    # -----------------------------------------------------------------------
    # Objects
    # -----------------------------------------------------------------------
    
    async def upload_object(self, bucket_name: str, key: str, body: ObjectBody) -> None:
        """Upload an object. The body is forwarded to the service unchanged."""
        await self._call(
            "PutObject",
            self._client.put_object,
            Bucket=bucket_name,
            Key=key,
            Body=body,
        )
        logger.debug("Uploaded object", extra={"bucket": bucket_name, "key": key})
    
    async def get_object(
        self,
        bucket_name: str,
        key: str,
        encoding: str = "utf-8",
    ) -> Optional[str]:
        """
        Download an object as text.
        
        Returns None when the service responds without a body. Bytes that
        are not valid in the encoding are replaced, never raised.
        """
        response = await self._call(
            "GetObject",
            self._client.get_object,
            Bucket=bucket_name,
            Key=key,
        )
        
        body = response.get("Body")
        if body is None:
            return None
        
        # Reading the stream is part of the round trip
        data = await self._call("GetObject", body.read)
        return data.decode(encoding, errors="replace")
    
    async def delete_one_object(self, bucket_name: str, key: str) -> None:
        """Delete one object. Deleting an absent key succeeds."""
        await self._call(
            "DeleteObject",
            self._client.delete_object,
            Bucket=bucket_name,
            Key=key,
        )
        logger.debug("Deleted object", extra={"bucket": bucket_name, "key": key})
    
    async def copy_object(
        self,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str,
    ) -> None:
        """Copy an object server-side; no bytes pass through this process."""
        await self._call(
            "CopyObject",
            self._client.copy_object,
            CopySource=f"{source_bucket}/{source_key}",
            Bucket=dest_bucket,
            Key=dest_key,
        )
        logger.debug(
            "Copied object",
            extra={
                "source": f"{source_bucket}/{source_key}",
                "destination": f"{dest_bucket}/{dest_key}",
            }
        )
    
    async def list_objects_page(
        self,
        bucket_name: str,
        continuation_token: Optional[str] = None,
    ) -> ListingPage:
        """Fetch one page of the bucket listing, starting at the given cursor."""
        params: dict[str, Any] = {"Bucket": bucket_name}
        if continuation_token is not None:
            params["ContinuationToken"] = continuation_token
        
        response = await self._call("ListObjectsV2", self._client.list_objects_v2, **params)
        return ListingPage.from_response(bucket_name, response)
    
    async def delete_all_objects(self, bucket_name: str) -> BulkDeleteResult:
        """
        Delete every object in a bucket.
        
        Walks the listing cursor page by page and deletes each key in the
        order the service lists it, one request at a time. Pages without
        contents are skipped.
        
        There is no rollback. If a request fails or the cursor guard trips
        once deletion has started, the loop stops and BulkDeleteError
        reports the keys already deleted. A failure before anything was
        deleted is raised as-is.
        
        Raises:
            BulkDeleteError: A request failed or the cursor guard tripped
                after deletion had started
            PaginationError: Before any deletion, the service repeated a
                continuation token, reported more pages without a token,
                or exceeded max_listing_pages
            StorageError: The first listing request failed
        """
        deleted: list[str] = []
        seen_tokens: set[str] = set()
        token: Optional[str] = None
        pages = 0
        
        while True:
            try:
                page = await self.list_objects_page(bucket_name, token)
            except StorageError as e:
                if not deleted:
                    raise
                raise BulkDeleteError(bucket_name, deleted, None, e) from e
            pages += 1
            
            for key in page.keys:
                try:
                    await self.delete_one_object(bucket_name, key)
                except StorageError as e:
                    logger.error(
                        "Bulk delete stopped",
                        extra={
                            "bucket": bucket_name,
                            "failed_key": key,
                            "deleted": len(deleted),
                        }
                    )
                    raise BulkDeleteError(bucket_name, deleted, key, e) from e
                deleted.append(key)
            
            if not page.has_more:
                break
            
            try:
                self._check_cursor(bucket_name, page, seen_tokens, pages, len(deleted))
            except PaginationError as e:
                if not deleted:
                    raise
                raise BulkDeleteError(bucket_name, deleted, None, e) from e
            seen_tokens.add(page.next_token)
            token = page.next_token
        
        logger.info(
            "Deleted all objects",
            extra={"bucket": bucket_name, "count": len(deleted), "pages": pages}
        )
        
        return BulkDeleteResult(
            bucket=bucket_name,
            deleted_keys=tuple(deleted),
            pages=pages,
        )
    
    # -----------------------------------------------------------------------
    # Presigned URLs
    # -----------------------------------------------------------------------
    
    async def create_presigned_url_with_client(
        self,
        bucket: str,
        key: str,
        expires_in: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> str:
        """
        Generate a temporary download URL for one object.
        
        The URL grants GET on exactly this object for expires_in seconds
        from issuance. Signing is local; no object data is transferred.
        """
        return await self.create_presigned_url(PresignedUrlRequest(bucket, key, expires_in))
    
    async def create_presigned_url(self, request: PresignedUrlRequest) -> str:
        url = await self._call(
            "GeneratePresignedUrl",
            self._client.generate_presigned_url,
            "get_object",
            Params={"Bucket": request.bucket, "Key": request.key},
            ExpiresIn=request.expires_in,
        )
        
        logger.debug(
            "Generated presigned URL",
            extra={
                "bucket": request.bucket,
                "key": request.key,
                "expires_in": request.expires_in,
            }
        )
        
        return url
    
    async def upload_sample_file(
        self,
        expires_in: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> str:
        """
        Smoke-test the configured account end to end.
        
        Creates a fresh timestamped bucket, uploads a small greeting and
        returns a presigned URL for it. The bucket is left in place.
        """
        bucket_name = f"test-bucket-{int(time.time() * 1000)}"
        await self.create_bucket(bucket_name)
        await self.upload_object(bucket_name, SAMPLE_OBJECT_KEY, SAMPLE_OBJECT_BODY)
        
        return await self.create_presigned_url_with_client(
            bucket_name,
            SAMPLE_OBJECT_KEY,
            expires_in=expires_in,
        )
    
    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------
    
    def _check_cursor(
        self,
        bucket_name: str,
        page: ListingPage,
        seen_tokens: set[str],
        pages: int,
        deleted: int,
    ) -> None:
        """Refuse to follow a cursor that cannot terminate."""
        if not page.next_token:
            reason = "listing reported more pages without a continuation token"
        elif page.next_token in seen_tokens:
            reason = "listing repeated a continuation token"
        elif self._max_listing_pages is not None and pages >= self._max_listing_pages:
            reason = f"listing exceeded {self._max_listing_pages} pages"
        else:
            return
        
        logger.error(
            "Aborting bulk delete",
            extra={"bucket": bucket_name, "reason": reason, "pages": pages, "deleted": deleted}
        )
        raise PaginationError(f"Bulk delete of bucket '{bucket_name}' aborted: {reason}")
    
    async def _call(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Run one blocking round trip in a worker thread.
        
        Translates botocore faults into the StorageError hierarchy
        without retrying.
        """
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        
        except ClientError as e:
            error = e.response.get("Error", {})
            metadata = e.response.get("ResponseMetadata", {})
            code = error.get("Code")
            logger.error(
                "Storage request failed",
                extra={"operation": operation, "code": code, "error": str(e)}
            )
            raise RemoteRequestError(
                f"{operation} failed: {e}",
                operation=operation,
                code=code,
                status_code=metadata.get("HTTPStatusCode"),
            ) from e
        
        except (BotoConnectionError, ReadTimeoutError, ConnectionClosedError) as e:
            logger.error(
                "Storage connection failed",
                extra={"operation": operation, "error": str(e)}
            )
            raise TransientNetworkError(f"{operation} failed: {e}", operation=operation) from e
        
        except (NoCredentialsError, PartialCredentialsError) as e:
            logger.error(
                "Storage credentials rejected",
                extra={"operation": operation, "error": str(e)}
            )
            raise StorageConfigurationError(f"{operation} failed: {e}") from e
        
        except BotoCoreError as e:
            logger.error(
                "Storage client error",
                extra={"operation": operation, "error": str(e)}
            )
            raise StorageError(f"{operation} failed: {e}") from e


# ---------------------------------------------------------------------------
# Factory Functions
# ---------------------------------------------------------------------------

def create_object_store(
    config: Optional[StoreConfiguration] = None,
    mock_mode: bool = False,
    max_listing_pages: Optional[int] = DEFAULT_MAX_LISTING_PAGES,
) -> S3ObjectStore:
    """
    Create an object store adapter.
    
    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, back the adapter with an in-memory handle
        max_listing_pages: Cap on pages walked by delete_all_objects
    
    Returns:
        S3ObjectStore over a boto3 or in-memory handle
    """
    if mock_mode:
        logger.info("Using in-memory storage handle")
        return S3ObjectStore(
            config=config,
            client=InMemoryS3Client(),
            max_listing_pages=max_listing_pages,
        )
    
    if config is None:
        raise ValueError("config is required when not in mock mode")
    
    return S3ObjectStore(config=config, max_listing_pages=max_listing_pages)


async def create_object_store_async(
    config_factory: Callable[[], Union[StoreConfiguration, Awaitable[StoreConfiguration]]],
    mock_mode: bool = False,
    max_listing_pages: Optional[int] = DEFAULT_MAX_LISTING_PAGES,
) -> S3ObjectStore:
    """
    Create an adapter once its configuration has been resolved.
    
    config_factory may be a plain function or a coroutine function, for
    configurations that depend on other asynchronously resolved values
    (a secrets manager, for instance). Its faults propagate unchanged.
    """
    config = config_factory()
    if inspect.isawaitable(config):
        config = await config
    
    return create_object_store(
        config=config,
        mock_mode=mock_mode,
        max_listing_pages=max_listing_pages,
    )
