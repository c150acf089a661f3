"""Tests for the embed endpoints."""

from fastapi.testclient import TestClient


class TestEmbedEndpoint:
    """Tests for POST /embed."""

    def test_renders_shell(self, auth_client: TestClient) -> None:
        """The shell lists facet blocks and carries the widget attributes."""
        response = auth_client.post(
            "/embed",
            json={
                "include_categories": "shoes",
                "filters_mode": "auto",
                "sort": "price_desc",
                "display": {"columns": 4, "pagination": "numbers"},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["widget_attrs"]["scope"]["includes"]["categories"] == [2]
        assert data["widget_attrs"]["display"]["pagination"] == "numbers"
        assert [block["facet"] for block in data["facet_blocks"]] == [
            "categories",
            "tags",
            "price",
            "rating",
        ]
        assert 'class="modep-grid modep-grid--grid"' in data["html"]
        assert '<option value="price_desc" selected>' in data["html"]

    def test_attributes_drive_fetch(self, auth_client: TestClient) -> None:
        """Posting the widget attributes back fetches the first page."""
        embed = auth_client.post(
            "/embed",
            json={"include_tags": "summer", "display": {"per_page": 4}},
        ).json()

        body = dict(embed["widget_attrs"], page=2)
        response = auth_client.post("/products/fetch", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["entry_ids"] == [21, 20, 19, 18]
        assert data["total_pages"] == 4

    def test_catalog_shell(self, auth_client: TestClient) -> None:
        """The catalog directive forces the catalog pool."""
        response = auth_client.post(
            "/embed/catalog",
            json={"pool_type": "sellable", "filters": "categories"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["widget_attrs"]["scope"]["pool_type"] == "catalog_only"
        assert data["widget_attrs"]["display"]["catalog_button_text"] == "Enquire now"
        assert data["facet_blocks"][0]["chips"][1]["label"] == "Furniture (10)"

    def test_invalid_rating(self, auth_client: TestClient) -> None:
        """Out-of-range ratings are validation errors."""
        response = auth_client.post("/embed", json={"rating_min": 7})

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "rating_min"

    def test_requires_api_key(self, client: TestClient) -> None:
        """The embed directive is protected."""
        response = client.post("/embed", json={})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
