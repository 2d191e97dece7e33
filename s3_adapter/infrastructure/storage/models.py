"""
Value types returned by the object store adapter.

All of these are immutable snapshots. The caller owns them after return;
nothing here holds a reference back to the connection handle.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

DEFAULT_PRESIGN_EXPIRY_SECONDS = 3600

UNKNOWN_OWNER_NAME = "unknown"
UNNAMED_BUCKET_NAME = "Unnamed"


@dataclass(frozen=True)
class PresignedUrlRequest:
    """
    Read capability to be signed for one object.
    
    expires_in is the number of seconds after issuance at which the
    storage service must reject the URL.
    """
    bucket: str
    key: str
    expires_in: int = DEFAULT_PRESIGN_EXPIRY_SECONDS
    
    def __post_init__(self) -> None:
        if isinstance(self.expires_in, bool) or not isinstance(self.expires_in, int):
            raise ValueError("expires_in must be an integer number of seconds")
        if self.expires_in <= 0:
            raise ValueError("expires_in must be positive")


@dataclass(frozen=True)
class ListingPage:
    """
    One page of a bucket listing.
    
    Lives for a single iteration of the bulk-delete loop.
    """
    bucket: str
    keys: tuple[str, ...]
    next_token: Optional[str] = None
    has_more: bool = False
    
    @classmethod
    def from_response(cls, bucket: str, response: dict[str, Any]) -> "ListingPage":
        """Build a page from a list_objects_v2 response."""
        contents = response.get("Contents") or []
        return cls(
            bucket=bucket,
            keys=tuple(obj["Key"] for obj in contents if "Key" in obj),
            next_token=response.get("NextContinuationToken"),
            has_more=bool(response.get("IsTruncated", False)),
        )
    
    @property
    def is_empty(self) -> bool:
        return not self.keys


@dataclass(frozen=True)
class OwnerInfo:
    """Account that owns the listed buckets."""
    name: str
    id: Optional[str] = None


@dataclass(frozen=True)
class BucketSummary:
    """A single entry from the bucket listing."""
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class BucketListing:
    """
    Result of list_buckets.
    
    Fields the service omits are replaced with sentinel names rather
    than raising, so callers can always render the listing.
    """
    owner: OwnerInfo
    buckets: tuple[BucketSummary, ...] = ()
    
    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "BucketListing":
        """Build a listing from a list_buckets response."""
        owner_data = response.get("Owner") or {}
        owner = OwnerInfo(
            name=owner_data.get("DisplayName") or UNKNOWN_OWNER_NAME,
            id=owner_data.get("ID"),
        )
        buckets = tuple(
            BucketSummary(
                name=bucket.get("Name") or UNNAMED_BUCKET_NAME,
                created_at=bucket.get("CreationDate"),
            )
            for bucket in response.get("Buckets") or []
        )
        return cls(owner=owner, buckets=buckets)
    
    @property
    def names(self) -> list[str]:
        return [bucket.name for bucket in self.buckets]


@dataclass(frozen=True)
class BulkDeleteResult:
    """Outcome of a completed delete_all_objects call."""
    bucket: str
    deleted_keys: tuple[str, ...] = ()
    pages: int = 0
    
    @property
    def deleted_count(self) -> int:
        return len(self.deleted_keys)
