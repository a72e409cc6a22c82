"""Tests for health check endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from storefront.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "storefront-api"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness endpoint returns ready status."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["regions"] >= 0
    assert data["products"] >= 0


def test_startup_configures_logging() -> None:
    """App startup runs the lifespan, which configures logging."""
    with patch("storefront.main.configure_logging") as mock_configure:
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
    mock_configure.assert_called_once_with()
