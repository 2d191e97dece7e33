"""
Connection handle for S3-compatible storage.

The handle is a boto3 S3 client bound to one region and credential pair.
It is built once per adapter and reused for every call; connection
pooling and request signing are botocore's concern.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from .errors import StorageConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreConfiguration:
    """
    Resolved configuration for the storage adapter.
    
    Values are not validated here. botocore rejects a malformed shape
    when the client is built, and bad credentials fail on the first call.
    
    endpoint_url is only needed for S3-compatible providers (MinIO, R2);
    leave it as None for AWS.
    """
    region: str
    access_key_id: str
    secret_access_key: str
    endpoint_url: Optional[str] = None


def create_s3_client(config: StoreConfiguration) -> Any:
    """
    Build the boto3 S3 client for a configuration.
    
    Raises:
        StorageConfigurationError: If botocore rejects the configuration
    """
    # v4 signatures are required for presigned URLs outside us-east-1
    boto_config = Config(signature_version="s3v4")
    
    try:
        client = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )
    except (BotoCoreError, ValueError) as e:
        logger.error(
            "Failed to create S3 client",
            extra={"region": config.region, "error": str(e)}
        )
        raise StorageConfigurationError(f"Invalid storage configuration: {e}") from e
    
    logger.info(
        "Initialized S3 client",
        extra={
            "region": config.region,
            "endpoint": config.endpoint_url or "aws",
        }
    )
    
    return client
