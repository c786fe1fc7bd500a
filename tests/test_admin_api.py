from conftest import obtain_token, auth_header
from models.order import Order
from storefront.services.admin import compute_stats
from storefront.services.orders import can_transition
from storefront.version import API_PREFIX

BASE = f"{API_PREFIX}/admin"


def place_order(client, username="buyer", quantity=2):
    user = obtain_token(client, username=username)
    product_id = client.post("/__seed/product", json={"price": 790, "original_price": 990}).get_json()["data"]["product_id"]
    address_id = client.post("/__seed/address", json={"uid": user["uid"]}).get_json()["data"]["address_id"]
    headers = auth_header(user["access"])
    client.post(f"{API_PREFIX}/cart/add", json={"product_id": product_id, "quantity": quantity}, headers=headers)
    resp = client.post(f"{API_PREFIX}/cart/checkout", json={"address_id": address_id}, headers=headers)
    return resp.get_json()["data"]["order_id"]


def admin_headers(client):
    return auth_header(obtain_token(client, username="boss", role="admin")["access"])


def test_admin_routes_reject_regular_users(client):
    token = obtain_token(client)["access"]
    assert client.get(f"{BASE}/orders", headers=auth_header(token)).status_code == 403
    assert client.get(f"{BASE}/orders").status_code == 401


def test_status_lifecycle(client, app):
    order_id = place_order(client)
    headers = admin_headers(client)
    url = f"{BASE}/orders/{order_id}/status"

    resp = client.post(url, json={"status": "processing"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["order"]["status"] == "processing"

    resp = client.post(url, json={"status": "pending_payment"}, headers=headers)
    assert resp.status_code == 409

    resp = client.post(url, json={"status": "delivered", "estimated_delivery_date": "2024-06-01T00:00:00"}, headers=headers)
    order = resp.get_json()["data"]["order"]
    assert order["status"] == "delivered"
    assert order["payment_status"] == "completed"
    assert order["estimated_delivery_date"].startswith("2024-06-01")

    assert client.post(url, json={"status": "cancelled"}, headers=headers).status_code == 409
    assert client.post(url, json={"status": "lost"}, headers=headers).status_code == 400
    assert client.post(f"{BASE}/orders/999/status", json={"status": "shipped"}, headers=headers).status_code == 404


def test_order_listing_filters_by_status(client):
    first = place_order(client, username="a1")
    place_order(client, username="a2")
    headers = admin_headers(client)
    client.post(f"{BASE}/orders/{first}/status", json={"status": "cancelled"}, headers=headers)

    resp = client.get(f"{BASE}/orders?status=cancelled", headers=headers)
    assert [o["id"] for o in resp.get_json()["data"]["orders"]] == [first]
    assert len(client.get(f"{BASE}/orders", headers=headers).get_json()["data"]["orders"]) == 2


def test_stats_follow_new_orders(client, app):
    headers = admin_headers(client)
    stats = client.get(f"{BASE}/stats", headers=headers).get_json()["data"]["stats"]
    assert stats["total_orders"] == 0

    order_id = place_order(client)
    stats = client.get(f"{BASE}/stats", headers=headers).get_json()["data"]["stats"]
    assert stats["total_orders"] == 1
    assert stats["active_users"] == 1
    assert stats["total_revenue"] == 0
    assert stats["top_products"][0]["total_sold"] == 2

    client.post(f"{BASE}/orders/{order_id}/status", json={"status": "delivered"}, headers=headers)
    stats = client.get(f"{BASE}/stats", headers=headers).get_json()["data"]["stats"]
    assert stats["total_revenue"] == 1587


def test_product_management(client):
    headers = admin_headers(client)
    resp = client.post(f"{BASE}/products", json={"name": "Rose", "price": 500, "original_price": 600}, headers=headers)
    assert resp.status_code == 201
    product = resp.get_json()["data"]["product"]
    assert product["percent_off"] == 17

    bad = client.post(f"{BASE}/products", json={"name": "Odd", "price": 700, "original_price": 600}, headers=headers)
    assert bad.status_code == 400

    resp = client.patch(f"{BASE}/products/{product['id']}", json={"price": 450}, headers=headers)
    assert resp.get_json()["data"]["product"]["price"] == 450
    assert client.patch(f"{BASE}/products/{product['id']}", json={"price": 900}, headers=headers).status_code == 400

    assert client.delete(f"{BASE}/products/{product['id']}", headers=headers).status_code == 200
    assert client.get(f"{BASE}/products", headers=headers).get_json()["data"]["products"] == []


def test_can_transition_rules():
    assert can_transition("pending_payment", "shipped")
    assert can_transition("shipped", "cancelled")
    assert not can_transition("shipped", "processing")
    assert not can_transition("cancelled", "processing")
    assert not can_transition("delivered", "cancelled")


def test_compute_stats_counts_only_completed_payments():
    orders = [
        {"user_id": "u1", "order_total": 100, "payment_status": "completed",
         "items": [{"product_id": "1", "product_name": "A", "quantity": 1, "total": 93}]},
        {"user_id": "u1", "order_total": 50, "payment_status": "pending",
         "items": [{"product_id": "1", "product_name": "A", "quantity": 2, "total": 43}]},
    ]
    stats = compute_stats(orders)
    assert stats["total_orders"] == 2
    assert stats["total_revenue"] == 100
    assert stats["active_users"] == 1
    assert stats["top_products"] == [{"product_id": "1", "product_name": "A", "total_sold": 3, "revenue": 136.0}]


def test_stats_include_orders_written_by_another_process(client, app):
    from sqlalchemy.orm import Session
    from models import db
    from models.order import OrderItem

    headers = admin_headers(client)
    assert client.get(f"{BASE}/stats", headers=headers).get_json()["data"]["stats"]["total_orders"] == 0

    # a separate session does not go through this app's commit hooks
    with Session(db.engine) as other:
        order = Order(user_id="elsewhere", order_total=797, delivery_address={}, payment_status="completed")
        order.items.append(OrderItem(product_id="9", product_name="Oud", product_image="", quantity=1, price=790, total=790))
        other.add(order)
        other.commit()

    stats = client.get(f"{BASE}/stats", headers=headers).get_json()["data"]["stats"]
    assert stats["total_orders"] == 1
    assert stats["total_revenue"] == 797
    assert stats["top_products"][0]["product_name"] == "Oud"


def test_started_dashboard_follows_commits(client, app):
    dashboard = app.extensions["admin_dashboard"]
    dashboard.start()
    assert dashboard.stats["total_orders"] == 0
    place_order(client)
    assert dashboard.stats["total_orders"] == 1
    assert len(dashboard.orders) == 1
