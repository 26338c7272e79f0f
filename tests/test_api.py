from datetime import timedelta
from decimal import Decimal
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from storefront.main import create_app
from storefront.stores import StoreError

from conftest import make_token


PHONE = {
    "name": "Phone",
    "price": 599.99,
    "category_id": 1,
    "description": "Fast",
    "color": "Black",
    "stock": 10,
    "featured": True,
    "image_url": "phone.jpg",
}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "storefront-catalog", "version": "1.0.0"}


def test_list_categories(client, catalog):
    response = client.get("/categories")
    assert response.status_code == 200
    assert sorted(c["name"] for c in response.json()) == ["Electronics", "Fashion"]


def test_get_category(client, catalog):
    category_id = catalog["electronics"].category_id
    response = client.get(f"/categories/{category_id}")
    assert response.status_code == 200
    assert response.json() == {"category_id": category_id, "name": "Electronics", "description": "Gadgets"}


def test_get_missing_category_is_404(client):
    assert client.get("/categories/404").status_code == 404


def test_non_integer_id_is_422(client):
    assert client.get("/categories/abc").status_code == 422
    assert client.get("/products?minPrice=cheap").status_code == 422


def test_category_products(client, catalog):
    response = client.get(f"/categories/{catalog['fashion'].category_id}/products")
    assert response.status_code == 200
    assert sorted(p["name"] for p in response.json()) == ["Men's T-Shirt", "Women's Dress"]


def test_create_category_as_admin(client, admin_headers):
    response = client.post("/categories", json={"name": "Books", "description": "Paper"}, headers=admin_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["category_id"] is not None
    assert client.get(f"/categories/{body['category_id']}").json() == body


def test_update_category_as_admin(client, admin_headers, catalog):
    category_id = catalog["fashion"].category_id
    response = client.put(
        f"/categories/{category_id}",
        json={"name": "Apparel", "description": "Clothes"},
        headers=admin_headers
    )
    assert response.status_code == 200
    assert response.content == b""
    assert client.get(f"/categories/{category_id}").json()["name"] == "Apparel"


def test_delete_category_is_idempotent(client, admin_headers, catalog):
    category_id = catalog["fashion"].category_id
    assert client.delete(f"/categories/{category_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/categories/{category_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/categories/{category_id}").status_code == 404


def test_search_products_query_parameters(client, catalog):
    fashion_id = catalog["fashion"].category_id

    assert len(client.get("/products").json()) == 5
    assert len(client.get("/products", params={"categoryId": fashion_id}).json()) == 2
    assert [p["name"] for p in client.get("/products", params={"minPrice": 500}).json()] == ["Gaming Laptop"]
    assert [p["name"] for p in client.get("/products", params={"maxPrice": "9.99"}).json()] == ["USB Cable"]
    assert len(client.get("/products", params={"color": "RED"}).json()) == 2
    assert [p["name"] for p in client.get("/products", params={"name": "phone"}).json()] == ["Smartphone"]
    assert client.get("/products", params={"categoryId": fashion_id, "color": "black"}).json() == []


def test_get_product(client, catalog):
    phone = catalog["phone"]
    response = client.get(f"/products/{phone.product_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Smartphone"
    assert body["price"] == 499.99
    assert body["featured"] is False


def test_get_missing_product_is_404(client):
    assert client.get("/products/404").status_code == 404


def test_create_product_returns_persisted_entity(client, admin_headers, product_store):
    response = client.post("/products", json={**PHONE, "product_id": 77}, headers=admin_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["product_id"] != 77
    assert body == {**PHONE, "product_id": body["product_id"]}
    assert product_store.get_by_id(body["product_id"]).price == Decimal("599.99")


def test_update_product_as_admin(client, admin_headers, catalog):
    phone = catalog["phone"]
    response = client.put(
        f"/products/{phone.product_id}",
        json={**PHONE, "name": "Phone 2", "price": 649},
        headers=admin_headers
    )
    assert response.status_code == 200
    assert response.content == b""
    body = client.get(f"/products/{phone.product_id}").json()
    assert body["name"] == "Phone 2"
    assert body["price"] == 649


def test_update_missing_product_reports_success(client, admin_headers):
    assert client.put("/products/999", json=PHONE, headers=admin_headers).status_code == 200
    assert client.get("/products").json() == []


def test_delete_product(client, admin_headers, catalog):
    product_id = catalog["cable"].product_id
    assert client.delete(f"/products/{product_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/products/{product_id}").status_code == 404
    assert client.delete(f"/products/{product_id}", headers=admin_headers).status_code == 204


def test_writes_without_token_are_401(client, catalog):
    assert client.post("/categories", json={"name": "X"}).status_code == 401
    assert client.put("/products/1", json=PHONE).status_code == 401
    assert client.delete("/products/1").status_code == 401


def test_invalid_or_expired_token_is_401(client):
    bad = {"Authorization": "Bearer not-a-jwt"}
    expired = {"Authorization": f"Bearer {make_token('admin', ['ROLE_ADMIN'], expires_in=timedelta(hours=-1))}"}
    forged = {"Authorization": f"Bearer {make_token('admin', ['ROLE_ADMIN'], secret='other-secret')}"}

    for headers in (bad, expired, forged):
        assert client.post("/categories", json={"name": "X"}, headers=headers).status_code == 401


def test_non_admin_writes_are_forbidden(client, user_headers, catalog):
    category_id = catalog["fashion"].category_id
    product_id = catalog["dress"].product_id

    assert client.post("/categories", json={"name": "X"}, headers=user_headers).status_code == 403
    assert client.put(f"/categories/{category_id}", json={"name": "X"}, headers=user_headers).status_code == 403
    assert client.delete(f"/categories/{category_id}", headers=user_headers).status_code == 403
    assert client.post("/products", json=PHONE, headers=user_headers).status_code == 403
    assert client.put(f"/products/{product_id}", json=PHONE, headers=user_headers).status_code == 403
    assert client.delete(f"/products/{product_id}", headers=user_headers).status_code == 403

    # nothing changed
    assert client.get(f"/categories/{category_id}").json()["name"] == "Fashion"
    assert client.get(f"/products/{product_id}").status_code == 200


def test_forbidden_caller_never_reaches_store(settings, provider, user_headers):
    category_store = MagicMock()
    product_store = MagicMock()
    client = TestClient(create_app(
        settings=settings,
        provider=provider,
        category_store=category_store,
        product_store=product_store
    ))

    client.post("/categories", json={"name": "X"}, headers=user_headers)
    client.delete("/products/1", headers=user_headers)

    category_store.create.assert_not_called()
    product_store.delete.assert_not_called()


def test_store_failures_become_500(settings, provider, admin_headers):
    category_store = MagicMock()
    product_store = MagicMock()
    for store in (category_store, product_store):
        for method in ("get_all", "get_by_id", "create", "update", "delete", "search", "list_by_category_id"):
            getattr(store, method).side_effect = StoreError("database is down")

    client = TestClient(create_app(
        settings=settings,
        provider=provider,
        category_store=category_store,
        product_store=product_store
    ))

    assert client.get("/categories").status_code == 500
    assert client.get("/categories/1").status_code == 500
    assert client.get("/categories/1/products").status_code == 500
    assert client.get("/products").status_code == 500
    assert client.get("/products/1").status_code == 500
    assert client.post("/categories", json={"name": "X"}, headers=admin_headers).status_code == 500
    assert client.put("/products/1", json=PHONE, headers=admin_headers).status_code == 500
    assert client.delete("/categories/1", headers=admin_headers).status_code == 500

    response = client.delete("/products/1", headers=admin_headers)
    assert response.status_code == 500
    assert "detail" in response.json()


def test_end_to_end_over_http(client, admin_headers):
    category = client.post(
        "/categories", json={"name": "Electronics", "description": "Gadgets"}, headers=admin_headers
    ).json()
    assert client.get(f"/categories/{category['category_id']}").json() == category

    product = client.post(
        "/products",
        json={"name": "Phone", "price": 599.99, "category_id": category["category_id"],
              "color": "Black", "stock": 10, "featured": True},
        headers=admin_headers
    ).json()

    assert client.get("/products", params={"categoryId": category["category_id"]}).json() == [product]
    assert client.get("/products", params={"color": "black"}).json() == [product]
    assert client.get("/products", params={"minPrice": 600}).json() == []
