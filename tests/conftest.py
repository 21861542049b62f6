"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from gateway.app.config import Settings
from gateway.app.execution import ExecutionLayer
from gateway.app.main import assemble_app
from gateway.app.schema import schema
from gateway.app.stores import SharedConnections
from tests.fakes import FakeDataSource, FakeStoreClient, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store_client() -> FakeStoreClient:
    return FakeStoreClient({"greeting": "hello"})


@pytest.fixture
def data_source() -> FakeDataSource:
    return FakeDataSource(["admin", "inventory"])


@pytest.fixture
def connections(store_client: FakeStoreClient, data_source: FakeDataSource) -> SharedConnections:
    return SharedConnections(store_client=store_client, data_source=data_source)


@pytest_asyncio.fixture
async def app(settings: Settings, connections: SharedConnections) -> FastAPI:
    """Assembled application backed by fake stores."""
    return await assemble_app(settings, connections, ExecutionLayer(schema))


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """In-process HTTP client for the assembled app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
