"""Shared fixtures for the content vault tests."""

import pytest

from content_vault.database import DatabaseService, ModelRegistry
from tests.factories import MODELS, make_fetcher


@pytest.fixture
def registry():
    """Create a registry with the cat and dog content types."""
    return ModelRegistry.from_dict(MODELS)


@pytest.fixture
def db_service(tmp_path, registry):
    """Create a temporary store for testing."""
    db = DatabaseService(tmp_path / "vault.db", registry)
    yield db
    db.close()


@pytest.fixture
def fetcher():
    """Create a mock fetcher."""
    return make_fetcher()
