"""
In-memory stand-in for the boto3 S3 client.

This enables running the adapter without provisioning real object
storage. It answers the subset of the S3 client API the adapter uses,
with the same response shapes and the same ClientError codes, so the
adapter code path is identical in mock mode and in production.

Not suitable for production, but perfect for development and testing.
"""

import base64
import io
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

from botocore.exceptions import ClientError
from botocore.response import StreamingBody

logger = logging.getLogger(__name__)

# Default page size of ListObjectsV2
DEFAULT_PAGE_SIZE = 1000


def _client_error(operation: str, code: str, message: str, status: int) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def _to_bytes(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    # file-like or stream
    data = body.read()
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class InMemoryS3Client:
    """
    Buckets and objects held in dictionaries.
    
    Listings are returned in key order and paged by page_size, with an
    opaque continuation token, like ListObjectsV2.
    """
    
    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        owner_name: Optional[str] = "mock-owner",
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        
        # {bucket: {key: bytes}}
        self._buckets: dict[str, dict[str, bytes]] = {}
        self._created: dict[str, datetime] = {}
        self._page_size = page_size
        self._owner_name = owner_name
        self._lock = threading.Lock()
        logger.info("Initialized in-memory storage handle")
    
    # Buckets
    
    def create_bucket(self, Bucket: str, **kwargs: Any) -> dict:
        with self._lock:
            if Bucket in self._buckets:
                raise _client_error(
                    "CreateBucket",
                    "BucketAlreadyOwnedByYou",
                    f"Bucket already exists: {Bucket}",
                    409,
                )
            self._buckets[Bucket] = {}
            self._created[Bucket] = datetime.now(timezone.utc)
        return {"Location": f"/{Bucket}"}
    
    def delete_bucket(self, Bucket: str, **kwargs: Any) -> dict:
        with self._lock:
            objects = self._require_bucket("DeleteBucket", Bucket)
            if objects:
                raise _client_error(
                    "DeleteBucket",
                    "BucketNotEmpty",
                    f"The bucket you tried to delete is not empty: {Bucket}",
                    409,
                )
            del self._buckets[Bucket]
            del self._created[Bucket]
        return {}
    
    def list_buckets(self, **kwargs: Any) -> dict:
        with self._lock:
            buckets = [
                {"Name": name, "CreationDate": self._created[name]}
                for name in sorted(self._buckets)
            ]
        owner = {"ID": "mock-owner-id"}
        if self._owner_name:
            owner["DisplayName"] = self._owner_name
        return {"Buckets": buckets, "Owner": owner}
    
    # Objects
    
    def put_object(self, Bucket: str, Key: str, Body: Any = None, **kwargs: Any) -> dict:
        data = _to_bytes(Body)
        with self._lock:
            self._require_bucket("PutObject", Bucket)[Key] = data
        return {"ETag": f'"{len(data)}"'}
    
    def get_object(self, Bucket: str, Key: str, **kwargs: Any) -> dict:
        with self._lock:
            objects = self._require_bucket("GetObject", Bucket)
            if Key not in objects:
                raise _client_error(
                    "GetObject",
                    "NoSuchKey",
                    f"The specified key does not exist: {Key}",
                    404,
                )
            data = objects[Key]
        return {
            "Body": StreamingBody(io.BytesIO(data), len(data)),
            "ContentLength": len(data),
        }
    
    def delete_object(self, Bucket: str, Key: str, **kwargs: Any) -> dict:
        with self._lock:
            self._require_bucket("DeleteObject", Bucket).pop(Key, None)
        return {"ResponseMetadata": {"HTTPStatusCode": 204}}
    
    def copy_object(self, CopySource: Any, Bucket: str, Key: str, **kwargs: Any) -> dict:
        if isinstance(CopySource, dict):
            source_bucket, source_key = CopySource["Bucket"], CopySource["Key"]
        else:
            source_bucket, _, source_key = CopySource.lstrip("/").partition("/")
        
        with self._lock:
            source = self._require_bucket("CopyObject", source_bucket)
            if source_key not in source:
                raise _client_error(
                    "CopyObject",
                    "NoSuchKey",
                    f"The specified key does not exist: {source_key}",
                    404,
                )
            self._require_bucket("CopyObject", Bucket)[Key] = source[source_key]
        return {"CopyObjectResult": {}}
    
    def list_objects_v2(
        self,
        Bucket: str,
        ContinuationToken: Optional[str] = None,
        MaxKeys: Optional[int] = None,
        Prefix: str = "",
        **kwargs: Any,
    ) -> dict:
        page_size = min(MaxKeys or self._page_size, self._page_size)
        
        with self._lock:
            keys = sorted(
                key for key in self._require_bucket("ListObjectsV2", Bucket)
                if key.startswith(Prefix)
            )
        
        if ContinuationToken is not None:
            start_after = self._decode_token(ContinuationToken)
            keys = [key for key in keys if key > start_after]
        
        page, rest = keys[:page_size], keys[page_size:]
        
        response: dict[str, Any] = {
            "Name": Bucket,
            "KeyCount": len(page),
            "IsTruncated": bool(rest),
        }
        if page:
            response["Contents"] = [{"Key": key} for key in page]
        if rest:
            response["NextContinuationToken"] = self._encode_token(page[-1])
        return response
    
    # Presigning
    
    def generate_presigned_url(
        self,
        ClientMethod: str,
        Params: Optional[dict] = None,
        ExpiresIn: int = 3600,
        **kwargs: Any,
    ) -> str:
        """Return a mock URL; nothing is signed."""
        params = Params or {}
        bucket = params.get("Bucket", "")
        key = quote(params.get("Key", ""))
        return f"mock://{bucket}/{key}?X-Amz-Expires={ExpiresIn}"
    
    # Internals
    
    def _require_bucket(self, operation: str, bucket: str) -> dict[str, bytes]:
        if bucket not in self._buckets:
            raise _client_error(
                operation,
                "NoSuchBucket",
                f"The specified bucket does not exist: {bucket}",
                404,
            )
        return self._buckets[bucket]
    
    @staticmethod
    def _encode_token(key: str) -> str:
        return base64.urlsafe_b64encode(key.encode("utf-8")).decode("ascii")
    
    @staticmethod
    def _decode_token(token: str) -> str:
        return base64.urlsafe_b64decode(token.encode("ascii")).decode("utf-8")
