"""Integration tests for /health, /healthz, /metrics and / endpoints."""

import httpx
import pytest

from tests.fakes import FakeDataSource, FakeStoreClient


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    @pytest.mark.asyncio
    async def test_health_always_ok(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_healthz_returns_200_when_all_ok(self, client: httpx.AsyncClient) -> None:
        """Test /healthz returns 200 when Redis and MongoDB answer."""
        response = await client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"] == {"redis": "ok", "mongo": "ok"}

    @pytest.mark.asyncio
    async def test_healthz_returns_503_when_redis_fails(
        self, client: httpx.AsyncClient, store_client: FakeStoreClient
    ) -> None:
        store_client.healthy = False

        response = await client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["redis"] == "error: ConnectionError"
        assert data["components"]["mongo"] == "ok"

    @pytest.mark.asyncio
    async def test_healthz_returns_503_when_mongo_fails(
        self, client: httpx.AsyncClient, data_source: FakeDataSource
    ) -> None:
        data_source.healthy = False

        response = await client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["redis"] == "ok"
        assert data["components"]["mongo"] == "error: ConnectionError"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_returns_prometheus_format(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]

    @pytest.mark.asyncio
    async def test_metrics_includes_gateway_metrics(self, client: httpx.AsyncClient) -> None:
        await client.post("/graphql", json={"query": "{ ping }"})

        response = await client.get("/metrics")

        text = response.text
        assert "cors_decisions_total" in text
        assert "request_contexts_total" in text
        assert "gateway_state" in text


class TestRootEndpoint:
    """Test root endpoint."""

    @pytest.mark.asyncio
    async def test_root_returns_api_info(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "GraphQL Gateway"
        assert data["version"] == "0.1.0"
        assert data["graphql"] == "/graphql"
