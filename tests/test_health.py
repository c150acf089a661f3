"""Tests for health check endpoints."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.domain.exceptions import BackendUnavailableError
from modefilter.infrastructure.stores import get_entry_store
from modefilter.main import app


class DownStore(InMemoryEntryStore):
    """Store that fails its ping."""

    async def ping(self) -> None:
        raise BackendUnavailableError("entry_store", "timeout")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client over an empty in-memory store."""
    app.dependency_overrides[get_entry_store] = lambda: InMemoryEntryStore()
    yield TestClient(app)
    app.dependency_overrides.pop(get_entry_store, None)


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "modefilter-api"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness endpoint returns ready status."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"


def test_readiness_reports_unreachable_store(client: TestClient) -> None:
    """Readiness fails while the entry store is down."""
    app.dependency_overrides[get_entry_store] = lambda: DownStore()
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "unavailable"
