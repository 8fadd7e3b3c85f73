"""
Test configuration and fixtures
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from book_service.app import create_app
from book_service.config import Settings
from book_service.domain.entities import Book
from book_service.repositories.memory_repository import InMemoryBookRepository
from book_service.repositories.repository import IRepository


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and .env files."""
    return Settings(
        _env_file=None,
        STORAGE_BACKEND="memory",
        LOG_LEVEL="DEBUG",
        LOG_JSON=False,
    )


@pytest.fixture
def memory_repo():
    """Create an empty in-memory book repository."""
    return InMemoryBookRepository()


@pytest.fixture
def mock_repo():
    """Create a mock repository with async CRUD methods."""
    return AsyncMock(spec=IRepository)


@pytest.fixture
def client(test_settings, memory_repo):
    """Create a test client backed by the in-memory repository."""
    app = create_app(test_settings, repository=memory_repo)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_client(test_settings, mock_repo):
    """Create a test client backed by a mock repository."""
    app = create_app(test_settings, repository=mock_repo)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def sample_book():
    """Unsaved sample book"""
    return Book(title="Dune", author="Herbert", year=1965)


@pytest.fixture
def sample_book_data():
    """Sample request body for creating a book"""
    return {"title": "Dune", "author": "Frank Herbert", "year": 1965}
