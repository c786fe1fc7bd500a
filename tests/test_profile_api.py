from conftest import obtain_token, auth_header
from storefront.version import API_PREFIX

BASE = f"{API_PREFIX}/profile"

ADDRESS = {
    "label": "Home",
    "full_name": "Asha Rao",
    "phone_number": "9876543210",
    "address_line1": "12 Wax Street",
    "city": "Pune",
    "state": "MH",
    "pincode": "411001",
}


def test_profile_requires_auth(client):
    assert client.get(BASE).status_code == 401


def test_get_and_update_profile(client):
    token = obtain_token(client, username="asha")["access"]
    resp = client.get(BASE, headers=auth_header(token))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["username"] == "asha"

    resp = client.patch(BASE, json={"full_name": "Asha R", "username": "asha_r"}, headers=auth_header(token))
    assert resp.status_code == 200
    user = resp.get_json()["data"]["user"]
    assert user["full_name"] == "Asha R"
    assert user["username"] == "asha_r"


def test_username_must_be_unique(client):
    obtain_token(client, username="taken")
    token = obtain_token(client, username="asha")["access"]
    resp = client.patch(BASE, json={"username": "taken"}, headers=auth_header(token))
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "auth/username-taken"


def test_address_book_default_handling(client):
    token = obtain_token(client)["access"]
    first = client.post(f"{BASE}/addresses", json=ADDRESS, headers=auth_header(token))
    assert first.status_code == 201
    first = first.get_json()["data"]["address"]
    second = client.post(f"{BASE}/addresses", json={**ADDRESS, "label": "Office"}, headers=auth_header(token))
    second = second.get_json()["data"]["address"]
    assert first["is_default"] is True
    assert second["is_default"] is False

    resp = client.delete(f"{BASE}/addresses/{first['id']}", headers=auth_header(token))
    assert resp.status_code == 200
    user = client.get(BASE, headers=auth_header(token)).get_json()["data"]["user"]
    assert [(a["id"], a["is_default"]) for a in user["addresses"]] == [(second["id"], True)]

    assert client.delete(f"{BASE}/addresses/nope", headers=auth_header(token)).status_code == 404


def test_address_validation(client):
    token = obtain_token(client)["access"]
    resp = client.post(f"{BASE}/addresses", json={**ADDRESS, "pincode": "41"}, headers=auth_header(token))
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_my_orders_starts_empty(client):
    token = obtain_token(client)["access"]
    resp = client.get(f"{BASE}/orders", headers=auth_header(token))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["orders"] == []
