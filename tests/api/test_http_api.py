from __future__ import annotations

import mysql.connector
import pytest

PREFIX = "/api"


def _login(client, email, password):
    return client.post(f"{PREFIX}/auth/login", json={"email": email, "password": password})


def test_health_and_index_need_no_token(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.get_json()["data"]["status"] == "ok"

    index = client.get(PREFIX)
    assert index.status_code == 200
    assert index.get_json()["data"]["endpoints"]["sales"] == f"{PREFIX}/sales"


def test_login_returns_token_usable_on_protected_routes(client, advisor_a):
    resp = _login(client, "a@bank.com", "Advisor123")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["expiresIn"] == 3600

    token = body["data"]["token"]
    verify = client.get(f"{PREFIX}/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert verify.status_code == 200
    assert verify.get_json()["data"]["user"]["email"] == "a@bank.com"


def test_login_failure_uses_error_envelope(client, advisor_a):
    resp = _login(client, "a@bank.com", "Wrong1234")
    assert resp.status_code == 401
    assert resp.get_json() == {
        "success": False,
        "error": {"message": "Invalid email or password", "code": "AUTHENTICATION_ERROR"},
    }


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-jwt"}, {"Authorization": "Basic abc"}])
def test_protected_routes_reject_missing_or_bad_tokens(client, headers):
    resp = client.get(f"{PREFIX}/sales", headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "AUTHENTICATION_ERROR"


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/users"),
        ("get", "/users/count-by-role"),
        ("post", "/users"),
        ("get", "/roles"),
        ("get", "/stats/by-advisor"),
    ],
)
def test_admin_routes_forbid_advisors(client, advisor_a, auth_headers, method, path):
    resp = getattr(client, method)(f"{PREFIX}{path}", headers=auth_headers(advisor_a), json={})
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "AUTHORIZATION_ERROR"


def test_create_sale_returns_201_with_view(client, advisor_a, auth_headers):
    resp = client.post(
        f"{PREFIX}/sales",
        headers=auth_headers(advisor_a),
        json={"productId": 1, "requestedAmount": 5000000, "rate": 15.5},
    )
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["productName"] == "Consumer Credit"
    assert data["requestedAmount"] == "5000000.00"
    assert data["rate"] == "15.50"
    assert data["franchiseId"] is None
    assert data["status"] == "Open"
    assert data["creatorEmail"] == "a@bank.com"


def test_create_sale_validation_error_has_details(client, advisor_a, auth_headers):
    resp = client.post(
        f"{PREFIX}/sales",
        headers=auth_headers(advisor_a),
        json={"productId": 3, "requestedAmount": 100, "rate": 10},
    )
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "franchiseId"


def test_malformed_json_is_a_validation_error(client, advisor_a, auth_headers):
    headers = dict(auth_headers(advisor_a), **{"Content-Type": "application/json"})
    resp = client.post(f"{PREFIX}/sales", headers=headers, data="{not json")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_two_advisors_only_see_their_own_sales(client, admin, advisor_a, advisor_b, auth_headers):
    a = client.post(
        f"{PREFIX}/sales",
        headers=auth_headers(advisor_a),
        json={"productId": 1, "requestedAmount": "5000000", "rate": "15.5"},
    ).get_json()["data"]
    b = client.post(
        f"{PREFIX}/sales",
        headers=auth_headers(advisor_b),
        json={"productId": 3, "requestedAmount": "2000000", "franchiseId": 2},
    ).get_json()["data"]

    listed_a = client.get(f"{PREFIX}/sales", headers=auth_headers(advisor_a)).get_json()["data"]
    assert [s["id"] for s in listed_a["items"]] == [a["id"]]
    assert listed_a["pagination"] == {
        "page": 1,
        "limit": 10,
        "total": 1,
        "totalPages": 1,
        "hasNextPage": False,
        "hasPrevPage": False,
    }

    assert client.get(f"{PREFIX}/sales/{b['id']}", headers=auth_headers(advisor_a)).status_code == 403
    assert client.put(
        f"{PREFIX}/sales/{b['id']}", headers=auth_headers(advisor_a), json={"status": "Finished"}
    ).status_code == 403

    total_a = client.get(f"{PREFIX}/sales/total", headers=auth_headers(advisor_a)).get_json()["data"]
    assert total_a == {"totalAmount": "5000000.00"}

    listed_admin = client.get(f"{PREFIX}/sales", headers=auth_headers(admin)).get_json()["data"]
    assert {s["id"] for s in listed_admin["items"]} == {a["id"], b["id"]}

    by_advisor = client.get(f"{PREFIX}/stats/by-advisor", headers=auth_headers(admin)).get_json()["data"]
    assert {row["userEmail"]: row["totalAmount"] for row in by_advisor} == {
        "a@bank.com": "5000000.00",
        "b@bank.com": "2000000.00",
    }


def test_admin_updates_and_deletes_any_sale(client, admin, advisor_a, auth_headers):
    created = client.post(
        f"{PREFIX}/sales",
        headers=auth_headers(advisor_a),
        json={"productId": 3, "requestedAmount": "250", "franchiseId": 1},
    ).get_json()["data"]

    updated = client.put(
        f"{PREFIX}/sales/{created['id']}",
        headers=auth_headers(admin),
        json={"status": "InProcess"},
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["status"] == "InProcess"
    assert updated.get_json()["data"]["updaterName"] == "Admin User"

    deleted = client.delete(f"{PREFIX}/sales/{created['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 200
    missing = client.get(f"{PREFIX}/sales/{created['id']}", headers=auth_headers(admin))
    assert missing.status_code == 404


def test_admin_creates_user_and_duplicate_is_conflict(client, admin, auth_headers):
    payload = {"name": "New Advisor", "email": "new@bank.com", "password": "Secret123", "roleId": 2}
    first = client.post(f"{PREFIX}/users", headers=auth_headers(admin), json=payload)
    assert first.status_code == 201
    assert first.get_json()["data"]["roleName"] == "Advisor"

    second = client.post(f"{PREFIX}/users", headers=auth_headers(admin), json=payload)
    assert second.status_code == 409
    assert second.get_json()["error"]["code"] == "DUPLICATE_ENTRY"


def test_catalog_lists_products_and_franchises(client, advisor_a, auth_headers):
    products = client.get(f"{PREFIX}/products", headers=auth_headers(advisor_a)).get_json()["data"]
    assert [p["id"] for p in products] == [1, 2, 3]
    franchises = client.get(f"{PREFIX}/franchises", headers=auth_headers(advisor_a)).get_json()["data"]
    assert [f["name"] for f in franchises] == ["AMEX", "VISA", "MASTERCARD"]

    card = client.get(f"{PREFIX}/products/3", headers=auth_headers(advisor_a)).get_json()["data"]
    assert card["name"] == "Credit Card"
    assert client.get(f"{PREFIX}/franchises/9", headers=auth_headers(advisor_a)).status_code == 404


def test_unknown_route_uses_error_envelope(client):
    resp = client.get(f"{PREFIX}/nope")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"


def test_database_failure_is_reported_as_database_error(client, sales_repo, advisor_a, auth_headers, monkeypatch):
    def broken(*args, **kwargs):
        raise mysql.connector.errors.OperationalError("Lost connection to MySQL server")

    monkeypatch.setattr(sales_repo, "list_views", broken)
    resp = client.get(f"{PREFIX}/sales", headers=auth_headers(advisor_a))
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": {"message": "Database error", "code": "DATABASE_ERROR"}}


def test_unexpected_failure_is_a_generic_server_error(client, sales_repo, advisor_a, auth_headers, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(sales_repo, "list_views", broken)
    resp = client.get(f"{PREFIX}/sales", headers=auth_headers(advisor_a))
    assert resp.status_code == 500
    assert resp.get_json()["error"] == {"message": "Internal server error", "code": "SERVER_ERROR"}
