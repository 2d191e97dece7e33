"""
Error taxonomy for object storage operations.

Every fault raised by the adapter derives from StorageError, so callers
can catch one type at the call site or discriminate on the subclass.
The original botocore exception is always chained as __cause__.
"""

from typing import Optional


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class StorageConfigurationError(StorageError):
    """Raised when region or credentials are missing or rejected by the transport."""
    pass


class RemoteRequestError(StorageError):
    """
    Raised when the storage service rejects a single request.
    
    The remote classification (NoSuchBucket, AccessDenied,
    BucketAlreadyOwnedByYou, ...) is carried opaquely in `code`.
    """
    
    def __init__(
        self,
        message: str,
        operation: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.code = code
        self.status_code = status_code


class TransientNetworkError(StorageError):
    """Raised on connectivity or timeout failures during a round trip."""
    
    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.operation = operation


class PaginationError(StorageError):
    """Raised when a listing cursor fails to terminate."""
    pass


class BulkDeleteError(StorageError):
    """
    Raised when delete_all_objects stops partway through a bucket.
    
    Objects in `deleted_keys` are already gone; there is no rollback.
    `cause` is the fault that stopped the loop.
    """
    
    def __init__(
        self,
        bucket: str,
        deleted_keys: list[str],
        failed_key: Optional[str],
        cause: Exception,
    ) -> None:
        super().__init__(
            f"Bulk delete of bucket '{bucket}' stopped after "
            f"{len(deleted_keys)} objects: {cause}"
        )
        self.bucket = bucket
        self.deleted_keys = tuple(deleted_keys)
        self.failed_key = failed_key
        self.cause = cause
    
    @property
    def deleted_count(self) -> int:
        return len(self.deleted_keys)
