"""Pytest configuration and fixtures for the actualization service."""

from datetime import datetime

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient

from actualization.services.cache.recovery_cache import RecoveryCache
from actualization.services.catalog.service import CatalogService, get_catalog_service
from actualization.services.queue.fact_queue import (
    FactQueue,
    get_fact_queue,
    get_redis_client,
)
from actualization.services.storage.document_store import CatalogDocumentStore
from tests.factories import NOW


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client for each test."""
    client = fakeredis.FakeRedis()
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()


@pytest.fixture()
def clock():
    """Mutable clock; tests move time by assigning ``clock.now``."""

    class _Clock:
        now: datetime = NOW

        def __call__(self) -> datetime:
            return self.now

    return _Clock()


@pytest.fixture()
def catalog_service(redis_client, clock):
    return CatalogService(
        CatalogDocumentStore(redis_client),
        RecoveryCache(redis_client),
        clock=clock,
    )


@pytest_asyncio.fixture()
async def client(redis_client, catalog_service):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from actualization.main import app

    app.dependency_overrides[get_redis_client] = lambda: redis_client
    app.dependency_overrides[get_fact_queue] = lambda: FactQueue(
        redis_client, "test:facts"
    )
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_redis_client, None)
        app.dependency_overrides.pop(get_fact_queue, None)
        app.dependency_overrides.pop(get_catalog_service, None)
