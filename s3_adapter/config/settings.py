"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode enables local development without object storage.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..infrastructure.storage.client import DEFAULT_MAX_LISTING_PAGES
from ..infrastructure.storage.connection import StoreConfiguration
from ..infrastructure.storage.errors import StorageConfigurationError
from ..infrastructure.storage.models import DEFAULT_PRESIGN_EXPIRY_SECONDS

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    All settings can be overridden via environment variables.
    """
    
    # S3 Storage Configuration
    s3_region: str = Field(
        default="us-east-1",
        description="Region the storage client is bound to"
    )
    s3_access_key_id: str = Field(
        default="",
        description="Access key ID. Required unless in mock mode."
    )
    s3_secret_access_key: str = Field(
        default="",
        description="Secret access key. Required unless in mock mode."
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint for S3-compatible providers (MinIO, R2). Leave unset for AWS."
    )
    s3_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory handle instead of real storage. Enables local dev without credentials."
    )
    s3_max_listing_pages: Optional[int] = Field(
        default=DEFAULT_MAX_LISTING_PAGES,
        ge=1,
        description="Upper bound on listing pages walked when emptying a bucket. Set to \"none\" to disable."
    )
    s3_presign_expiry_seconds: int = Field(
        default=DEFAULT_PRESIGN_EXPIRY_SECONDS,
        ge=1,
        description="Lifetime of presigned URLs issued by scripts"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_parse_none_str="none",
    )
    
    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode.
        
        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on whether we're in mock mode.
        """
        missing = []
        
        if not self.s3_mock_mode:
            if not self.s3_region:
                missing.append("S3_REGION")
            if not self.s3_access_key_id:
                missing.append("S3_ACCESS_KEY_ID")
            if not self.s3_secret_access_key:
                missing.append("S3_SECRET_ACCESS_KEY")
        
        return missing


def build_store_configuration(settings: Settings) -> StoreConfiguration:
    """
    Resolve the storage configuration from settings.
    
    Raises:
        StorageConfigurationError: If required variables are missing
    """
    missing = settings.validate_required_fields()
    if missing:
        raise StorageConfigurationError(
            f"Missing required configuration: {', '.join(missing)}"
        )
    
    return StoreConfiguration(
        region=settings.s3_region,
        access_key_id=settings.s3_access_key_id,
        secret_access_key=settings.s3_secret_access_key,
        endpoint_url=settings.s3_endpoint_url or None,
    )


def configure_logging(level: str = "INFO") -> None:
    """Apply the standard log format for scripts and local runs."""
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    
    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
