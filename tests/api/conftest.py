"""Shared fixtures for API tests."""

from collections.abc import Callable, Generator, Sequence

import pytest
from fastapi.testclient import TestClient

from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.catalog.store import EntryQuery, EntryStore
from modefilter.domain.exceptions import BackendUnavailableError
from modefilter.infrastructure.config import settings
from modefilter.infrastructure.stores import get_entry_store
from modefilter.infrastructure.tokens import get_token_signer
from modefilter.main import app


class UnreachableStore(InMemoryEntryStore):
    """Store whose backend is down."""

    async def find_ids(self, query: EntryQuery) -> list[int]:
        raise BackendUnavailableError("entry_store", "connection refused by 10.0.0.5")

    async def count_memberships(self, axis, entry_ids: Sequence[int]) -> dict[int, int]:
        raise BackendUnavailableError("entry_store", "connection refused by 10.0.0.5")

    async def ping(self) -> None:
        raise BackendUnavailableError("entry_store", "connection refused by 10.0.0.5")


@pytest.fixture
def unreachable_store() -> UnreachableStore:
    """A store that cannot be reached."""
    return UnreachableStore()


@pytest.fixture
def use_store() -> Generator[Callable[[EntryStore], None], None, None]:
    """Swap the entry store behind the API for the duration of a test."""

    def _use(store: EntryStore) -> None:
        app.dependency_overrides[get_entry_store] = lambda: store

    yield _use
    app.dependency_overrides.pop(get_entry_store, None)


@pytest.fixture
def client(
    scenario_store: InMemoryEntryStore, use_store: Callable[[EntryStore], None]
) -> TestClient:
    """Create test client over the scenario catalog, without authentication."""
    use_store(scenario_store)
    return TestClient(app)


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """Create test client with valid API key authentication."""
    client.headers["Authorization"] = f"Bearer {settings.api_key}"
    return client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {settings.api_key}"}


@pytest.fixture
def token() -> str:
    """A fresh fetch token."""
    return get_token_signer().issue()
