"""Tests for order placement, quantity limits, stock and the seller order workflow."""

from datetime import datetime, timedelta

import pytest

from core.exceptions import BusinessLogicError
from models.order import Order, OrderStatus
from models.product import Product, ProductStatus
from services.order import decrement_stock


def order_payload(product_id, quantity, **overrides):
    payload = {
        "productId": product_id,
        "fullName": "Jane Customer",
        "email": "jane@example.com",
        "phone": "5551234567",
        "shippingAddress": "12 Harbour Street, Springfield",
        "quantity": quantity,
    }
    payload.update(overrides)
    return payload


class TestPlaceOrder:

    def test_order_within_limits_decrements_stock(self, client, db_session, make_product):
        product = make_product(quantity=20, min_order_quantity=2, max_order_quantity=10)
        product_id = product.id

        response = client.post("/api/orders", json=order_payload(product_id, 7, size="M", color="Red"))

        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 7
        assert data["total_amount"] == 70.0
        assert data["currency"] == "USD"
        assert data["status"] == "pending"
        assert data["size"] == "M"
        assert db_session.query(Product).filter(Product.id == product_id).one().quantity == 13

    def test_quantity_bounds_end_to_end(self, client, db_session, make_product):
        product = make_product(quantity=20, min_order_quantity=5, max_order_quantity=10)
        product_id = product.id

        too_few = client.post("/api/orders", json=order_payload(product_id, 3))
        too_many = client.post("/api/orders", json=order_payload(product_id, 15))
        accepted = client.post("/api/orders", json=order_payload(product_id, 7))

        assert too_few.status_code == 400
        assert too_few.json()["message"] == "Minimum order quantity is 5"
        assert too_many.status_code == 400
        assert too_many.json()["message"] == "Maximum order quantity is 10"
        assert accepted.status_code == 200
        assert db_session.query(Order).count() == 1
        assert db_session.query(Product).filter(Product.id == product_id).one().quantity == 13

    def test_below_minimum(self, client, db_session, make_product):
        product = make_product(quantity=20, min_order_quantity=2, max_order_quantity=10)

        response = client.post("/api/orders", json=order_payload(product.id, 1))

        assert response.status_code == 400
        assert response.json()["message"] == "Minimum order quantity is 2"
        assert db_session.query(Order).count() == 0

    def test_above_maximum(self, client, make_product):
        product = make_product(quantity=20, min_order_quantity=2, max_order_quantity=10)

        response = client.post("/api/orders", json=order_payload(product.id, 11))

        assert response.status_code == 400
        assert response.json()["message"] == "Maximum order quantity is 10"

    def test_above_stock(self, client, make_product):
        product = make_product(quantity=5)

        response = client.post("/api/orders", json=order_payload(product.id, 6))

        assert response.status_code == 400
        assert response.json()["message"] == "Only 5 items available in stock"

    def test_zero_quantity_hits_the_minimum(self, client, make_product):
        product = make_product()

        response = client.post("/api/orders", json=order_payload(product.id, 0))

        assert response.status_code == 400
        assert response.json()["message"] == "Minimum order quantity is 1"

    def test_unknown_product(self, client):
        response = client.post("/api/orders", json=order_payload("does-not-exist", 1))
        assert response.status_code == 404

    @pytest.mark.parametrize("overrides", [
        {"status": ProductStatus.DRAFT},
        {"status": ProductStatus.INACTIVE},
        {"is_deleted": True},
    ])
    def test_unavailable_product(self, client, make_product, overrides):
        product = make_product(**overrides)

        response = client.post("/api/orders", json=order_payload(product.id, 1))

        assert response.status_code == 403

    def test_invalid_form_is_rejected(self, client, product):
        response = client.post("/api/orders", json=order_payload(product.id, 1, phone="123", email="nope"))
        assert response.status_code == 422

    def test_failed_stock_decrement_leaves_no_order(self, client, db_session, make_product, monkeypatch):
        product = make_product(quantity=20)
        product_id = product.id

        def sold_out(db, product_id, quantity):
            raise BusinessLogicError("Not enough stock left to fulfil this order")

        monkeypatch.setattr("services.order.decrement_stock", sold_out)
        response = client.post("/api/orders", json=order_payload(product_id, 3))

        assert response.status_code == 400
        assert db_session.query(Order).count() == 0
        assert db_session.query(Product).filter(Product.id == product_id).one().quantity == 20


class TestDecrementStock:

    def test_decrements_when_enough_stock(self, db_session, make_product):
        product = make_product(quantity=4)

        decrement_stock(db_session, product.id, 4)
        db_session.commit()

        db_session.refresh(product)
        assert product.quantity == 0

    def test_refuses_to_go_negative(self, db_session, make_product):
        product = make_product(quantity=3)

        with pytest.raises(BusinessLogicError):
            decrement_stock(db_session, product.id, 5)
        db_session.rollback()

        db_session.refresh(product)
        assert product.quantity == 3


class TestSellerOrders:

    def test_list_only_own_orders(self, client, auth_headers, other_seller, make_product, make_order):
        mine = make_product(title="Mine")
        theirs = make_product(owner=other_seller, title="Theirs")
        own_order = make_order(mine)
        make_order(theirs)

        response = client.get("/api/orders", headers=auth_headers)

        assert response.status_code == 200
        orders = response.json()
        assert [o["id"] for o in orders] == [own_order.id]
        assert orders[0]["products"]["title"] == "Mine"

    def test_list_filters_by_product(self, client, auth_headers, make_product, make_order):
        first = make_product(title="First")
        second = make_product(title="Second")
        make_order(first)
        wanted = make_order(second)

        response = client.get("/api/orders", params={"productId": second.id}, headers=auth_headers)

        assert [o["id"] for o in response.json()] == [wanted.id]

    def test_get_other_sellers_order_is_forbidden(self, client, other_auth_headers, product, make_order):
        order = make_order(product)
        response = client.get(f"/api/orders/{order.id}", headers=other_auth_headers)
        assert response.status_code == 403


class TestOrderStatus:

    def test_owner_updates_status(self, client, auth_headers, product, make_order):
        order = make_order(product)

        response = client.put(f"/api/orders/{order.id}/status", json={"status": "shipped"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "shipped"

    def test_requires_session(self, client, product, make_order):
        order = make_order(product)
        response = client.put(f"/api/orders/{order.id}/status", json={"status": "shipped"})
        assert response.status_code == 401

    def test_missing_order(self, client, auth_headers):
        response = client.put("/api/orders/nope/status", json={"status": "shipped"}, headers=auth_headers)
        assert response.status_code == 404

    def test_other_seller_is_forbidden(self, client, other_auth_headers, product, make_order):
        order = make_order(product)
        response = client.put(
            f"/api/orders/{order.id}/status", json={"status": "shipped"}, headers=other_auth_headers
        )
        assert response.status_code == 403

    def test_invalid_status(self, client, auth_headers, product, make_order):
        order = make_order(product)
        response = client.put(f"/api/orders/{order.id}/status", json={"status": "lost"}, headers=auth_headers)
        assert response.status_code == 400

    def test_batch_status_updates_owned_orders_only(
        self, client, db_session, auth_headers, other_seller, product, make_product, make_order
    ):
        first = make_order(product)
        second = make_order(product)
        foreign = make_order(make_product(owner=other_seller, title="Theirs"))
        foreign_id = foreign.id

        response = client.patch(
            "/api/orders/batch-status",
            json={"orderIds": [first.id, second.id, foreign_id], "status": "processing"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["updatedCount"] == 2
        assert {o["status"] for o in data["updatedOrders"]} == {"processing"}
        assert db_session.query(Order).filter(Order.id == foreign_id).one().status == OrderStatus.PENDING

    def test_batch_status_with_no_owned_orders(self, client, other_auth_headers, product, make_order):
        order = make_order(product)
        response = client.patch(
            "/api/orders/batch-status",
            json={"orderIds": [order.id], "status": "processing"},
            headers=other_auth_headers,
        )
        assert response.status_code == 400


class TestOrderExport:

    def test_exports_rows(self, client, auth_headers, product, make_order):
        make_order(product, quantity=2, notes=None)

        response = client.post("/api/orders/export", json={}, headers=auth_headers)

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["product_title"] == "Linen Shirt"
        assert rows[0]["customer_name"] == "Jane Customer"
        assert rows[0]["notes"] == ""
        assert rows[0]["total_amount"] == 20.0

    def test_filters_by_date_range_and_status(self, client, auth_headers, product, make_order):
        make_order(product, created_at=datetime.utcnow() - timedelta(days=40))
        recent = make_order(product, status=OrderStatus.DELIVERED)
        make_order(product)

        response = client.post(
            "/api/orders/export",
            json={
                "dateRange": {"from": (datetime.utcnow() - timedelta(days=7)).isoformat()},
                "status": "delivered",
            },
            headers=auth_headers,
        )

        assert [row["order_id"] for row in response.json()] == [recent.id]

    def test_nothing_to_export(self, client, auth_headers):
        response = client.post("/api/orders/export", json={}, headers=auth_headers)
        assert response.status_code == 404
