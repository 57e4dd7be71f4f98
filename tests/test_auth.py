"""
Tests for API authentication against the production app.
"""
import pytest
from fastapi.testclient import TestClient

from symptom_svc.core.config import API_KEY as TEST_API_KEY


@pytest.fixture
def authenticated_client():
    """Production app without lifespan startup (no network probe)."""
    from symptom_svc.core.dependencies import reset_dependencies
    from symptom_svc.main import app

    yield TestClient(app)
    reset_dependencies()


class TestAuthentication:
    """Test suite for API authentication."""

    def test_missing_api_key_returns_401(self, authenticated_client):
        response = authenticated_client.get("/api/v1/session")
        assert response.status_code == 401
        assert "Missing API key" in response.json()["detail"]

    def test_invalid_api_key_returns_403(self, authenticated_client):
        response = authenticated_client.get(
            "/api/v1/session",
            headers={"X-API-Key": "invalid-key"}
        )
        assert response.status_code == 403
        assert "Invalid API key" in response.json()["detail"]

    def test_valid_api_key_allows_access(self, authenticated_client):
        response = authenticated_client.get(
            "/api/v1/session",
            headers={"X-API-Key": TEST_API_KEY}
        )
        assert response.status_code == 200
        assert response.headers["X-Request-ID"]

    def test_root_and_health_need_no_auth(self, authenticated_client):
        assert authenticated_client.get("/").status_code == 200
        assert authenticated_client.get("/health").status_code == 200

    def test_symptom_endpoints_require_auth(self, authenticated_client):
        assert authenticated_client.get("/api/v1/symptoms").status_code == 401
        assert authenticated_client.post("/api/v1/symptoms", json={}).status_code == 401
        assert authenticated_client.delete("/api/v1/symptoms/1").status_code == 401
