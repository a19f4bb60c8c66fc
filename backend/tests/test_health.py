"""
Tests for health check endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

from shared.config.settings import settings


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        """Basic health check should return healthy status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "rest-api"
        assert data["environment"] == settings.environment

    def test_detailed_all_healthy(self, client, monkeypatch):
        redis_client = MagicMock()
        redis_client.ping = AsyncMock(return_value=True)
        monkeypatch.setattr(
            "shared.infrastructure.events.health_checks.get_redis_pool",
            AsyncMock(return_value=redis_client),
        )

        response = client.get("/api/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"]["database"]["status"] == "healthy"
        assert data["dependencies"]["database"]["details"]["dialect"] == "sqlite"
        assert data["dependencies"]["redis"]["status"] == "healthy"

    def test_detailed_redis_down(self, client, monkeypatch):
        monkeypatch.setattr(
            "shared.infrastructure.events.health_checks.get_redis_pool",
            AsyncMock(side_effect=ConnectionError("connection refused")),
        )

        response = client.get("/api/health/detailed")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["dependencies"]["database"]["status"] == "healthy"
        assert data["dependencies"]["redis"]["status"] == "unhealthy"
        assert "connection refused" in data["dependencies"]["redis"]["error"]
