"""
Pytest configuration and shared fixtures.
"""

import os

# Settings are loaded on import of api.config
os.environ.setdefault("ELASTIC_URL", "http://localhost:9200")

import pytest
from unittest.mock import AsyncMock
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig

from api.models import Book


@pytest.fixture
def make_api_error():
    """Factory for engine API errors carrying a given HTTP status."""
    def _make(error_class, status: int, message: str = "error"):
        meta = ApiResponseMeta(
            status=status,
            http_version="1.1",
            headers=HttpHeaders(),
            duration=0.0,
            node=NodeConfig("http", "localhost", 9200),
        )
        return error_class(message=message, meta=meta, body={"error": message})
    return _make


@pytest.fixture
def mock_es_client():
    """Create a mock Elasticsearch client for testing."""
    client = AsyncMock()
    client.index.return_value = {"result": "created"}
    client.update.return_value = {"result": "updated"}
    client.delete.return_value = {"result": "deleted"}
    client.ping.return_value = True
    return client


@pytest.fixture
def sample_book():
    """Create sample book data for testing."""
    return Book(title="Neuromancer", author="William Gibson", year=1984)
