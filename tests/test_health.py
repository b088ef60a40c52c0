"""Tests for the health check endpoint."""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from shopledger.api.health import check_database, get_uptime_seconds, set_app_start_time


class FailingSession:
    """Stands in for a session whose connection is gone."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_endpoint_returns_200_when_db_ok(self, unauthenticated_client: AsyncClient) -> None:
        response = await unauthenticated_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["checks"]["database"]["status"] == "ok"
        assert isinstance(data["checks"]["database"]["response_time_ms"], int)

    @pytest.mark.asyncio
    async def test_health_endpoint_content_type(self, unauthenticated_client: AsyncClient) -> None:
        response = await unauthenticated_client.get("/health")

        assert "application/json" in response.headers["content-type"]

    def test_health_endpoint_uptime_tracking(self) -> None:
        """Uptime is measured from the recorded start time."""
        set_app_start_time(datetime.now() - timedelta(hours=1))

        uptime = get_uptime_seconds()

        assert 3590 <= uptime <= 3610, f"Expected ~3600 seconds, got {uptime}"


class TestHealthCheckDegradedStates:
    """Test health check behavior when dependencies fail."""

    @pytest.mark.asyncio
    async def test_database_down_is_reported(self) -> None:
        result = await check_database(FailingSession())

        assert result["status"] == "down"
        assert result["error"] == "OperationalError"
        assert result["response_time_ms"] >= 0
