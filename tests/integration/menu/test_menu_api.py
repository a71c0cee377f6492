"""Integration tests for the public catalog endpoints."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


class TestCatalogEndpoints:
    def test_sizes_are_public(self, api_client, menu):
        response = api_client.get("/api/v1/sizes/")
        assert response.status_code == 200
        assert response.json() == [
            {"name": "small", "price": "5.00", "max_ingredients": 3},
            {"name": "medium", "price": "7.00", "max_ingredients": 5},
            {"name": "large", "price": "9.00", "max_ingredients": 7},
        ]

    def test_bases(self, api_client, menu):
        response = api_client.get("/api/v1/bases/")
        assert response.status_code == 200
        assert [b["name"] for b in response.json()] == ["pizza", "pasta", "salad"]

    def test_ingredients(self, api_client, menu):
        response = api_client.get("/api/v1/ingredients/")
        assert response.status_code == 200
        by_name = {item["name"]: item for item in response.json()}
        assert len(by_name) == len(menu)

        assert by_name["truffle"] == {
            "name": "truffle",
            "price": "3.00",
            "quantity": 2,
            "requires": "mushrooms",
            "incompatibilities": [],
        }
        assert by_name["olives"]["quantity"] is None
        assert by_name["olives"]["requires"] is None
        assert by_name["mushrooms"]["incompatibilities"] == ["eggs", "ham"]
        assert by_name["ham"]["incompatibilities"] == ["mushrooms"]

    def test_catalog_is_read_only(self, api_client, menu):
        response = api_client.post("/api/v1/sizes/", {"name": "giant"}, format="json")
        assert response.status_code in (401, 403, 405)
