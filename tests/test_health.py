"""Health endpoint tests."""

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from shortener.dependencies import get_service_manager
from shortener.enums import HealthStatus
from shortener.main import app


def _manager(cache_error=None) -> SimpleNamespace:
    return SimpleNamespace(
        logger=logging.getLogger("shortener"),
        ping_database=AsyncMock(),
        ping_cache=AsyncMock(side_effect=cache_error),
    )


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    app.dependency_overrides[get_service_manager] = lambda: _manager()

    response = await client.get("/_health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == HealthStatus.HEALTHY.value
    assert data["database"] == HealthStatus.HEALTHY.value
    assert data["cache"] == HealthStatus.HEALTHY.value


@pytest.mark.asyncio
async def test_health_check_cache_down(client: AsyncClient) -> None:
    app.dependency_overrides[get_service_manager] = lambda: _manager(RedisConnectionError("refused"))

    response = await client.get("/_health")
    data = response.json()
    assert data["status"] == HealthStatus.UNHEALTHY.value
    assert data["database"] == HealthStatus.HEALTHY.value
    assert data["cache"] == HealthStatus.UNHEALTHY.value


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient) -> None:
    await client.post("/shorten", json={"long_url": "https://example.com"})

    response = await client.get("/_metrics")
    assert response.status_code == 200
    assert "shortener_create_requests_total" in response.text
