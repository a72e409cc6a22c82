"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from storefront.catalog.repository import reset_product_repository, reset_region_repository
from storefront.infrastructure.config import settings
from storefront.main import app


@pytest.fixture(autouse=True)
def empty_catalog() -> None:
    """Start every test with an empty document store."""
    reset_region_repository()
    reset_product_repository()


@pytest.fixture
def client() -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)


@pytest.fixture
def admin_client() -> TestClient:
    """Create test client with the admin API key."""
    return TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.admin_api_key}"},
    )


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Get admin authentication headers."""
    return {"Authorization": f"Bearer {settings.admin_api_key}"}
