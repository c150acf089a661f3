"""Tests for the fetch endpoint."""

from collections.abc import Callable

from fastapi.testclient import TestClient

from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.catalog.store import EntryStore
from modefilter.infrastructure.tokens import FetchTokenSigner


class TestFetchEndpoint:
    """Tests for POST /products/fetch."""

    def test_first_page(self, client: TestClient, token: str) -> None:
        """A valid request returns the first eligible page."""
        response = client.post("/products/fetch", json={"token": token})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["entry_ids"] == list(range(25, 16, -1))
        assert data["total_count"] == 15
        assert data["total_pages"] == 2
        assert data["layout_params"] == {
            "grid_layout": "grid",
            "masonry_gap": 20,
            "justified_row_height": 220,
        }
        assert "facet_blocks" not in data
        assert "message" not in data

    def test_selection_and_facets(self, client: TestClient, token: str) -> None:
        """Selections of shown facets filter; initial render adds blocks."""
        response = client.post(
            "/products/fetch",
            json={
                "token": token,
                "filters": "categories,price",
                "active_facet_selections": {"price": "0|12"},
                "include_facets": True,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["entry_ids"] == [12, 11]
        assert [block["facet"] for block in data["facet_blocks"]] == ["categories", "price"]
        assert data["facet_blocks"][0]["filter_key"] == "category"

    def test_no_results(
        self,
        client: TestClient,
        token: str,
        use_store: Callable[[EntryStore], None],
    ) -> None:
        """An empty eligible set is a 200 with a message."""
        use_store(InMemoryEntryStore())
        response = client.post("/products/fetch", json={"token": token})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "no_results"
        assert data["message"] == "No products found."
        assert data["entries_html"] == ""


class TestFetchErrors:
    """Error envelopes of the fetch endpoint."""

    def test_missing_token(self, client: TestClient) -> None:
        """Requests without a token are rejected."""
        response = client.post("/products/fetch", json={}, headers={"X-Request-ID": "req-1"})

        assert response.status_code == 401
        data = response.json()
        assert data["error_code"] == "INVALID_TOKEN"
        assert data["message"] == "Security check failed"
        assert data["details"] == []
        assert data["request_id"] == "req-1"

    def test_expired_token(self, client: TestClient) -> None:
        """Expired tokens are rejected."""
        expired = FetchTokenSigner(clock=lambda: 0.0).issue()
        response = client.post("/products/fetch", json={"token": expired})
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"

    def test_forged_token(self, client: TestClient) -> None:
        """Tokens signed with another secret are rejected."""
        forged = FetchTokenSigner(secret="someone-else").issue()
        response = client.post("/products/fetch", json={"token": forged})
        assert response.status_code == 401

    def test_inverted_price_range(self, client: TestClient, token: str) -> None:
        """Scope validation failures name the field."""
        response = client.post(
            "/products/fetch",
            json={"token": token, "scope": {"price_min": 100, "price_max": 50}},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "price_min"

    def test_unknown_sort(self, client: TestClient, token: str) -> None:
        """Unknown sort keys are rejected."""
        response = client.post(
            "/products/fetch",
            json={"token": token, "scope": {"sort": "popularity"}},
        )
        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "sort"

    def test_per_page_out_of_range(self, client: TestClient, token: str) -> None:
        """Body validation errors use the same envelope."""
        response = client.post(
            "/products/fetch",
            json={"token": token, "display": {"per_page": 0}},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "display.per_page"

    def test_backend_down(
        self,
        client: TestClient,
        token: str,
        use_store: Callable[[EntryStore], None],
        unreachable_store: EntryStore,
    ) -> None:
        """Backend failures are 503 without internal detail."""
        use_store(unreachable_store)
        response = client.post("/products/fetch", json={"token": token})

        assert response.status_code == 503
        data = response.json()
        assert data["error_code"] == "BACKEND_UNAVAILABLE"
        assert data["details"] == []
        assert "10.0.0.5" not in response.text
