from conftest import obtain_token, auth_header
from models.order import Order
from models.storage import StoredBlob
from storefront.version import API_PREFIX


def seed_product(client, **fields):
    resp = client.post("/__seed/product", json=fields)
    return resp.get_json()["data"]["product_id"]


def seed_address(client, uid):
    resp = client.post("/__seed/address", json={"uid": uid})
    return resp.get_json()["data"]["address_id"]


def add(client, token, product_id, **extra):
    return client.post(
        f"{API_PREFIX}/cart/add",
        json={"product_id": product_id, **extra},
        headers=auth_header(token),
    )


def test_anonymous_cart_is_empty_with_platform_fee(client):
    resp = client.get(f"{API_PREFIX}/cart/view", headers={"X-Cart-Session": "abc"})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["items"] == []
    assert data["summary"]["total"] == 7
    assert data["summary"]["total_items"] == 0


def test_anonymous_add_requires_sign_in(client):
    product_id = seed_product(client)
    resp = client.post(f"{API_PREFIX}/cart/add", json={"product_id": product_id})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "AUTHENTICATION_REQUIRED"


def test_add_view_update_remove_clear(client, app):
    token = obtain_token(client)["access"]
    product_id = seed_product(client, price=790, original_price=990)

    resp = add(client, token, product_id, is_gift=True, quantity=2)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    item_id = data["item_id"]
    assert data["summary"] == {
        "subtotal": 1580.0,
        "total_discount": 400.0,
        "gift_charges": 60.0,
        "platform_fee": 7.0,
        "total": 1647.0,
        "total_items": 2,
    }

    # same product again is a separate line
    second = add(client, token, product_id).get_json()["data"]
    assert len(second["items"]) == 2
    assert second["item_id"] != item_id

    contains = client.get(f"{API_PREFIX}/cart/contains/{product_id}", headers=auth_header(token))
    assert contains.get_json()["data"]["in_cart"] is True

    resp = client.post(f"{API_PREFIX}/cart/update", json={"item_id": item_id, "quantity": 3}, headers=auth_header(token))
    quantities = {i["id"]: i["quantity"] for i in resp.get_json()["data"]["items"]}
    assert quantities[item_id] == 3

    resp = client.post(f"{API_PREFIX}/cart/update", json={"item_id": item_id, "quantity": 0}, headers=auth_header(token))
    assert item_id not in {i["id"] for i in resp.get_json()["data"]["items"]}

    resp = client.post(f"{API_PREFIX}/cart/remove", json={"item_id": second["item_id"]}, headers=auth_header(token))
    assert resp.get_json()["data"]["items"] == []

    add(client, token, product_id)
    resp = client.post(f"{API_PREFIX}/cart/clear", headers=auth_header(token))
    assert resp.get_json()["data"]["items"] == []
    assert StoredBlob.query.count() == 1


def test_add_unknown_or_out_of_stock_product(client):
    token = obtain_token(client)["access"]
    assert add(client, token, 9999).status_code == 404
    hidden = seed_product(client, in_stock=False)
    assert add(client, token, hidden).status_code == 404


def test_add_rejects_bad_quantity(client):
    token = obtain_token(client)["access"]
    product_id = seed_product(client)
    resp = add(client, token, product_id, quantity=0)
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_non_object_body_is_a_validation_error(client):
    token = obtain_token(client)["access"]
    resp = client.post(f"{API_PREFIX}/cart/add", json=[1, 2], headers=auth_header(token))
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"] == [{"field": "body", "message": "Request body must be a JSON object"}]


def test_checkout_creates_pending_order(client, app):
    user = obtain_token(client)
    token = user["access"]
    product_id = seed_product(client, price=790, original_price=990, images=["vanilla.jpg"])
    address_id = seed_address(client, user["uid"])
    add(client, token, product_id, is_gift=True, quantity=2)

    resp = client.post(f"{API_PREFIX}/cart/checkout", json={"address_id": address_id}, headers=auth_header(token))
    assert resp.status_code == 201
    order_id = resp.get_json()["data"]["order_id"]

    order = Order.query.get(order_id)
    assert order.user_id == user["uid"]
    assert order.status == "pending_payment"
    assert order.payment_status == "pending"
    assert order.order_total == 1647
    assert order.delivery_address["city"] == "Pune"
    assert [(i.product_id, i.quantity, i.total) for i in order.items] == [(str(product_id), 2, 1580)]

    view = client.get(f"{API_PREFIX}/cart/view", headers=auth_header(token))
    assert view.get_json()["data"]["items"] == []


def test_checkout_errors(client):
    user = obtain_token(client)
    token = user["access"]
    address_id = seed_address(client, user["uid"])

    resp = client.post(f"{API_PREFIX}/cart/checkout", json={"address_id": address_id}, headers=auth_header(token))
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "EMPTY_CART"

    add(client, token, seed_product(client))
    resp = client.post(f"{API_PREFIX}/cart/checkout", json={"address_id": "nope"}, headers=auth_header(token))
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "ADDRESS_NOT_FOUND"

    resp = client.post(f"{API_PREFIX}/cart/checkout", json={"address_id": address_id})
    assert resp.status_code == 401


def test_negative_quantity_update_removes_line(client):
    token = obtain_token(client)["access"]
    product_id = seed_product(client)
    keep = add(client, token, product_id).get_json()["data"]["item_id"]
    drop = add(client, token, product_id, is_gift=True).get_json()["data"]["item_id"]

    resp = client.post(f"{API_PREFIX}/cart/update", json={"item_id": drop, "quantity": -5}, headers=auth_header(token))
    assert resp.status_code == 200
    assert [i["id"] for i in resp.get_json()["data"]["items"]] == [keep]
