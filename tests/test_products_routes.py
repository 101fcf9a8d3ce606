"""
tests/test_products_routes.py -- Integration tests for product CRUD.

Coverage:
  - POST 201 returns the record with the raw categoryId
  - GET resolves categoryId to {id, title}
  - categoryId is not checked for existence on write
  - NaN and Infinity prices are rejected
  - Deleting a category does not cascade: the product keeps its stale id
  - PUT resolves the category; unknown id is 404 and changes nothing
  - DELETE confirms; unknown id is 404
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

_MISSING_ID = "65f0c0ffee0000000000abcd"


def _category(client: TestClient, headers: dict, title: str = "Tools") -> dict:
    resp = client.post("/api/categories", json={"title": title, "description": f"{title} aisle"}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _product(client: TestClient, headers: dict, category_id: str, name: str = "Hammer", price=12.5) -> dict:
    resp = client.post(
        "/api/products",
        json={"name": name, "description": f"A {name.lower()}", "categoryId": category_id, "price": price},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestProductCreateAndList:
    def test_create_returns_raw_category_id(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers)
        data = _product(client, auth_headers, category["id"])
        assert data["name"] == "Hammer"
        assert data["description"] == "A hammer"
        assert data["categoryId"] == category["id"]
        assert data["price"] == 12.5
        assert len(data["id"]) == 24

    def test_list_resolves_category_title(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers, "Garden")
        product = _product(client, auth_headers, category["id"], "Rake", 20)
        resp = client.get("/api/products", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == [
            {
                "id": product["id"],
                "name": "Rake",
                "description": "A rake",
                "categoryId": {"id": category["id"], "title": "Garden"},
                "price": 20.0,
            }
        ]

    def test_list_resolves_several_categories(self, client: TestClient, auth_headers: dict) -> None:
        tools = _category(client, auth_headers, "Tools")
        paint = _category(client, auth_headers, "Paint")
        _product(client, auth_headers, tools["id"], "Hammer")
        _product(client, auth_headers, paint["id"], "Primer")
        _product(client, auth_headers, tools["id"], "Wrench")
        listed = client.get("/api/products", headers=auth_headers).json()
        titles = {p["name"]: p["categoryId"]["title"] for p in listed}
        assert titles == {"Hammer": "Tools", "Primer": "Paint", "Wrench": "Tools"}

    def test_unknown_category_id_is_accepted(self, client: TestClient, auth_headers: dict) -> None:
        data = _product(client, auth_headers, _MISSING_ID)
        assert data["categoryId"] == _MISSING_ID
        listed = client.get("/api/products", headers=auth_headers).json()
        assert listed[0]["categoryId"] == {"id": _MISSING_ID, "title": None}

    def test_malformed_category_id_is_400(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.post(
            "/api/products",
            json={"name": "Saw", "description": "A saw", "categoryId": "tools", "price": 9},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert "categoryId" in resp.json()["error"]

    def test_missing_price_is_400(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers)
        resp = client.post(
            "/api/products",
            json={"name": "Saw", "description": "A saw", "categoryId": category["id"]},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_non_numeric_price_is_400(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers)
        resp = client.post(
            "/api/products",
            json={"name": "Saw", "description": "A saw", "categoryId": category["id"], "price": "cheap"},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_price_is_400(self, client: TestClient, auth_headers: dict, literal: str) -> None:
        category = _category(client, auth_headers)
        raw = (
            '{"name": "Saw", "description": "A saw", '
            f'"categoryId": "{category["id"]}", "price": {literal}}}'
        )
        resp = client.post(
            "/api/products",
            content=raw.encode(),
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert "price" in resp.json()["error"]
        assert client.get("/api/products", headers=auth_headers).json() == []


class TestCategoryDeleteDoesNotCascade:
    def test_product_keeps_stale_category_id(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers)
        product = _product(client, auth_headers, category["id"])

        resp = client.delete(f"/api/categories/{category['id']}", headers=auth_headers)
        assert resp.status_code == 200

        stored = client.portal.call(client.app.state.inventory.get_product, product["id"])
        assert stored is not None
        assert stored.category_id == category["id"]

        listed = client.get("/api/products", headers=auth_headers).json()
        assert len(listed) == 1
        assert listed[0]["categoryId"] == {"id": category["id"], "title": None}


class TestProductUpdate:
    def test_update_returns_resolved_category(self, client: TestClient, auth_headers: dict) -> None:
        tools = _category(client, auth_headers, "Tools")
        garden = _category(client, auth_headers, "Garden")
        product = _product(client, auth_headers, tools["id"])
        resp = client.put(
            f"/api/products/{product['id']}",
            json={"name": "Shovel", "description": "A shovel", "categoryId": garden["id"], "price": 30},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json() == {
            "id": product["id"],
            "name": "Shovel",
            "description": "A shovel",
            "categoryId": {"id": garden["id"], "title": "Garden"},
            "price": 30.0,
        }

    def test_update_unknown_id_is_404_and_mutates_nothing(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers)
        _product(client, auth_headers, category["id"])
        before = client.get("/api/products", headers=auth_headers).json()
        resp = client.put(
            f"/api/products/{_MISSING_ID}",
            json={"name": "Ghost", "description": "Nope", "categoryId": category["id"], "price": 1},
            headers=auth_headers,
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Product not found"}
        assert client.get("/api/products", headers=auth_headers).json() == before

    def test_update_malformed_id_is_404(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.put(
            "/api/products/42",
            json={"name": "N", "description": "D", "categoryId": _MISSING_ID, "price": 1},
            headers=auth_headers,
        )
        assert resp.status_code == 404


class TestProductDelete:
    def test_delete_confirms_and_removes(self, client: TestClient, auth_headers: dict) -> None:
        category = _category(client, auth_headers)
        product = _product(client, auth_headers, category["id"])
        resp = client.delete(f"/api/products/{product['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Product deleted successfully"}
        assert client.get("/api/products", headers=auth_headers).json() == []
        assert len(client.get("/api/categories", headers=auth_headers).json()) == 1

    def test_delete_unknown_is_404(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.delete(f"/api/products/{_MISSING_ID}", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json() == {"error": "Product not found"}
