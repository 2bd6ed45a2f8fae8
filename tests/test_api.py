"""
HTTP surface: routers wired to the SQLite store and the in-memory ledger.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import fail_on
from ecobazaar.api import create_app
from ecobazaar.api.deps import get_ledger, get_notifier
from ecobazaar.data.database import get_store
from ecobazaar.domain.schemas import Role


@pytest.fixture
def client(store, ledger, notifier):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_notifier] = lambda: notifier
    return TestClient(app)


@pytest.fixture
def user(make_profile):
    return make_profile(role=Role.USER, carbon_points=0)


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"message": "Healthy"}
        assert client.get("/health/store").json() == {"store": "ok", "ok": True}


class TestProducts:
    def test_catalog_is_public(self, client, make_product):
        pid = make_product(name="Kettle")
        response = client.get("/products")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [pid]


class TestCarts:
    def test_cart_requires_identity(self, client):
        assert client.get("/carts").status_code == 401

    def test_add_to_cart_recommendation_then_direct(self, client, user, make_product):
        skillet = make_product(name="Skillet", carbon=2, eco=True, price="30")
        pan = make_product(name="Pan", carbon=5, eco=False, price="35")

        response = client.post("/carts/items", params={"user_id": user.id}, json={"product_id": pan})
        body = response.json()
        assert response.status_code == 200
        assert body["added"] is False
        assert body["recommendation"]["alternatives"][0]["product"]["id"] == skillet
        assert body["recommendation"]["alternatives"][0]["carbon_savings_percent"] == 60

        response = client.post("/carts/items/direct", params={"user_id": user.id}, json={"product_id": skillet})
        cart = response.json()
        assert response.status_code == 200
        assert cart["item_count"] == 1
        assert cart["items"][0]["product_id"] == skillet

    def test_quantity_zero_is_clamped(self, client, user, make_product, put_in_cart):
        item = put_in_cart(user.id, make_product(), 4)

        response = client.patch(f"/carts/items/{item}", params={"user_id": user.id}, json={"quantity": 0})

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 1

    def test_remove_unknown_item(self, client, user):
        assert client.delete("/carts/items/nope", params={"user_id": user.id}).status_code == 404


class TestOrders:
    def test_checkout_and_history(self, client, user, make_product, put_in_cart):
        put_in_cart(user.id, make_product(price="20", carbon=1, eco=True), 2)
        headers = {"Idempotency-Key": "abc"}

        response = client.post("/orders", params={"user_id": user.id}, headers=headers)
        assert response.status_code == 201
        result = response.json()
        assert result["checkout_key"] == "abc"
        assert result["order"]["carbon_points_earned"] == 20
        assert result["cart"]["items"] == []

        replay = client.post("/orders", params={"user_id": user.id}, headers=headers).json()
        assert replay["replayed"] is True
        assert replay["order"]["id"] == result["order"]["id"]

        orders = client.get("/orders", params={"user_id": user.id}).json()
        assert [o["id"] for o in orders] == [result["order"]["id"]]

        items = client.get(f"/orders/{result['order']['id']}/items", params={"user_id": user.id}).json()
        assert items[0]["quantity"] == 2

        assert client.get("/profiles/me", params={"user_id": user.id}).json()["profile"]["carbon_points"] == 20

    def test_checkout_empty_cart(self, client, user):
        assert client.post("/orders", params={"user_id": user.id}).status_code == 400

    def test_partial_checkout_reports_order(self, client, store, user, make_product, put_in_cart):
        put_in_cart(user.id, make_product(), 1)

        with fail_on(store, "update", "profiles"):
            response = client.post("/orders", params={"user_id": user.id}, headers={"Idempotency-Key": "k"})

        detail = response.json()["detail"]
        assert response.status_code == 500
        assert detail["checkout_key"] == "k"
        assert detail["failed_step"] == "credit_profile"
        assert detail["completed_steps"] == ["create_order", "write_items"]

    def test_checkout_store_failure(self, client, store, user, make_product, put_in_cart):
        put_in_cart(user.id, make_product(), 1)

        with fail_on(store, "insert", "orders"):
            response = client.post("/orders", params={"user_id": user.id})

        assert response.status_code == 502


class TestProfilesAndSellers:
    def test_role_selection_and_seller_routes(self, client, make_profile):
        profile = make_profile(role=None)
        params = {"user_id": profile.id}

        assert client.post("/products", params=params, json={
            "name": "Jute Bag", "price": "8.00", "carbon_footprint": 0.4, "category": "Home", "stock": 10,
        }).status_code == 403

        assert client.post("/profiles/me/role", params=params, json={"role": "seller"}).json()["role"] == "seller"
        assert client.post("/profiles/me/role", params=params, json={"role": "admin"}).status_code == 400

        response = client.post("/products", params=params, json={
            "name": "Jute Bag", "price": "8.00", "carbon_footprint": 0.4, "category": "Home", "stock": 10,
        })
        assert response.status_code == 201
        assert response.json()["seller_id"] == profile.id

        stats = client.get("/products/seller/stats", params=params).json()
        assert stats["total_products"] == 1
        assert len(client.get("/products/seller", params=params).json()) == 1


class TestAdmin:
    def test_admin_stats_forbidden_for_shopper(self, client, user):
        assert client.get("/admin/stats", params={"user_id": user.id}).status_code == 403
