"""
Shared fixtures for the object store tests.

The adapter runs against InMemoryS3Client, which answers with the same
response shapes and error codes as the boto3 client. Individual tests
swap in MagicMock handles when they need to script a misbehaving service.
"""

import pytest

from s3_adapter.config.settings import get_settings
from s3_adapter.dependencies import reset_mock_object_store
from s3_adapter.infrastructure.storage.client import S3ObjectStore
from s3_adapter.infrastructure.storage.memory import InMemoryS3Client


@pytest.fixture
def memory_client():
    """In-memory handle with a small page size so listings span pages."""
    return InMemoryS3Client(page_size=2)


@pytest.fixture
def store(memory_client):
    return S3ObjectStore(client=memory_client)


@pytest.fixture(autouse=True)
def _reset_cached_state():
    yield
    get_settings.cache_clear()
    reset_mock_object_store()
