"""
Unit tests for presigned URL issuance.

These use a real boto3 client with dummy credentials. Presigning is done
locally by botocore, so no request ever leaves the process.
"""

from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import BotoCoreError

from s3_adapter.infrastructure.storage.client import S3ObjectStore
from s3_adapter.infrastructure.storage.connection import StoreConfiguration, create_s3_client
from s3_adapter.infrastructure.storage.errors import StorageConfigurationError
from s3_adapter.infrastructure.storage.models import PresignedUrlRequest


@pytest.fixture
def config():
    return StoreConfiguration(
        region="eu-west-1",
        access_key_id="AKIAEXAMPLEKEY",
        secret_access_key="example-secret",
    )


@pytest.fixture
def s3_store(config):
    return S3ObjectStore(config=config)


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


class TestPresignedUrl:
    """Tests for create_presigned_url_with_client."""
    
    @pytest.mark.asyncio()
    async def test_default_expiry_is_one_hour(self, s3_store):
        url = await s3_store.create_presigned_url_with_client("test-bucket", "k.txt")
        
        query = _query(url)
        assert query["X-Amz-Expires"] == ["3600"]
        assert query["X-Amz-Algorithm"] == ["AWS4-HMAC-SHA256"]
        assert "X-Amz-Signature" in query
    
    @pytest.mark.asyncio()
    async def test_explicit_expiry_is_signed(self, s3_store):
        url = await s3_store.create_presigned_url_with_client("test-bucket", "k.txt", expires_in=60)
        
        assert _query(url)["X-Amz-Expires"] == ["60"]
    
    @pytest.mark.asyncio()
    async def test_url_addresses_the_object(self, s3_store):
        url = await s3_store.create_presigned_url_with_client("test-bucket", "reports/q1.csv")
        
        parsed = urlparse(url)
        assert "test-bucket" in parsed.netloc + parsed.path
        assert parsed.path.endswith("reports/q1.csv")
        assert _query(url)["X-Amz-Credential"][0].startswith("AKIAEXAMPLEKEY/")
    
    @pytest.mark.asyncio()
    async def test_request_object_is_accepted(self, s3_store):
        url = await s3_store.create_presigned_url(PresignedUrlRequest("test-bucket", "k.txt", 120))
        
        assert _query(url)["X-Amz-Expires"] == ["120"]
    
    @pytest.mark.asyncio()
    async def test_non_positive_expiry_is_rejected(self, s3_store):
        with pytest.raises(ValueError, match="positive"):
            await s3_store.create_presigned_url_with_client("test-bucket", "k.txt", expires_in=0)
    
    @pytest.mark.asyncio()
    async def test_mock_handle_reports_expiry(self, store):
        url = await store.create_presigned_url_with_client("b", "k.txt", expires_in=60)
        
        assert url == "mock://b/k.txt?X-Amz-Expires=60"


class TestPresignedUrlRequest:
    """Tests for the PresignedUrlRequest value object."""
    
    def test_defaults_to_one_hour(self):
        assert PresignedUrlRequest("b", "k").expires_in == 3600
    
    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="positive"):
            PresignedUrlRequest("b", "k", expires_in=-5)
    
    def test_rejects_non_integer(self):
        with pytest.raises(ValueError, match="integer"):
            PresignedUrlRequest("b", "k", expires_in=1.5)


class TestConnectionHandle:
    """Tests for building the boto3 handle."""
    
    def test_handle_is_bound_to_region(self, config):
        client = create_s3_client(config)
        
        assert client.meta.region_name == "eu-west-1"
    
    def test_custom_endpoint_is_used(self):
        client = create_s3_client(
            StoreConfiguration(
                region="auto",
                access_key_id="key",
                secret_access_key="secret",
                endpoint_url="http://localhost:9000",
            )
        )
        
        assert client.meta.endpoint_url == "http://localhost:9000"
    
    def test_rejected_configuration_is_a_configuration_error(self, config):
        with patch("boto3.client", side_effect=BotoCoreError()):
            with pytest.raises(StorageConfigurationError) as exc_info:
                create_s3_client(config)
        
        assert isinstance(exc_info.value.__cause__, BotoCoreError)
    
    def test_adapter_exposes_handle(self, s3_store):
        assert s3_store.get_client().meta.service_model.service_name == "s3"
