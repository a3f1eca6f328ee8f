from __future__ import annotations

from cms.core.config import get_settings
from cms.core.security import verify_session_token
from cms.models.employee import Role

from tests.conftest import ADMIN_CODE, ADMIN_PASSWORD, login

COOKIE = get_settings().session_cookie_name


def _payload(n: int, prefix: str = "person") -> dict:
    return {
        "firstname": f"First{n}",
        "lastname": f"Last{n}",
        "mobile": f"0900000{n:04d}",
        "date_of_birth": "1990-01-01",
        "email": f"{prefix}{n}@example.com",
    }


def _token(client, code: str, password: str) -> dict:
    resp = login(client, code, password)
    assert resp.status_code == 200, resp.text
    token = resp.cookies[COOKIE]
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def test_login_sets_http_only_cookie(client):
    resp = login(client, ADMIN_CODE, ADMIN_PASSWORD)
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["user"]["role"] == "admin"

    set_cookie = resp.headers["set-cookie"]
    assert f"{COOKIE}=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "Path=/" in set_cookie
    assert "samesite=strict" in set_cookie.lower()

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["employee_code"] == ADMIN_CODE


def test_login_failures_are_generic(client):
    unknown = login(client, "NOPE001", "whatever1")
    wrong = login(client, ADMIN_CODE, "wrong-password")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()
    assert unknown.json()["error"] == "authentication_error"


def test_requests_without_session_are_unauthenticated(client):
    assert client.get("/api/customers").status_code == 401
    assert client.get("/api/employees").status_code == 401
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/customers", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_logout_clears_cookie(client):
    login(client, ADMIN_CODE, ADMIN_PASSWORD)
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/me").status_code == 401


def test_employee_partial_update_and_password_change(client):
    admin = _token(client, ADMIN_CODE, ADMIN_PASSWORD)
    created = client.post("/api/employees", json={**_payload(1, "staff"), "password": "secret123"}, headers=admin).json()

    assert client.patch(f"/api/employees/{created['id']}", json={}, headers=admin).status_code == 422

    resp = client.patch(f"/api/employees/{created['id']}", json={"email": "x@y.com"}, headers=admin)
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["email"] == "x@y.com"
    assert (updated["id"], updated["employee_code"], updated["role"]) == (created["id"], created["employee_code"], "user")

    resp = client.put(f"/api/employees/{created['id']}/password", json={"password": "changed99"}, headers=admin)
    assert resp.status_code == 200
    assert login(client, created["employee_code"], "changed99").status_code == 200


def test_employee_listing_filters_by_role(client):
    admin = _token(client, ADMIN_CODE, ADMIN_PASSWORD)
    client.post("/api/employees", json={**_payload(1, "staff"), "password": "secret123"}, headers=admin)

    admins = client.get("/api/employees", params={"role": "admin"}, headers=admin).json()
    everyone = client.get("/api/employees", headers=admin).json()
    assert [e["employee_code"] for e in admins] == [ADMIN_CODE]
    assert len(everyone) == 2
    assert all("hashed_password" not in e and "password" not in e for e in everyone)


def test_missing_records_are_not_found(client):
    admin = _token(client, ADMIN_CODE, ADMIN_PASSWORD)
    assert client.delete("/api/employees/9999", headers=admin).status_code == 404
    resp = client.delete("/api/customers/9999", headers=admin)
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_duplicate_email_is_a_conflict(client):
    admin = _token(client, ADMIN_CODE, ADMIN_PASSWORD)
    assert client.post("/api/customers", json=_payload(1), headers=admin).status_code == 201
    resp = client.post("/api/customers", json=_payload(1), headers=admin)
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"


def test_end_to_end_ownership_flow(client):
    admin = _token(client, ADMIN_CODE, ADMIN_PASSWORD)
    resp = login(client, ADMIN_CODE, ADMIN_PASSWORD)
    identity = verify_session_token(resp.cookies[COOKIE])
    client.cookies.clear()
    assert identity is not None and identity.role is Role.ADMIN

    resp = client.post("/api/employees", json={**_payload(1, "staff"), "password": "secret123", "role": "user"}, headers=admin)
    assert resp.status_code == 201
    staff = resp.json()
    assert staff["employee_code"] == "EMP001"
    assert staff["role"] == "user"

    other = client.post("/api/employees", json={**_payload(2, "staff"), "password": "secret123"}, headers=admin).json()

    staff_headers = _token(client, staff["employee_code"], "secret123")
    resp = client.post("/api/customers", json=_payload(1), headers=staff_headers)
    assert resp.status_code == 201
    customer = resp.json()
    assert customer["customer_code"] == "CUST001"
    assert customer["created_by"] == staff["id"]

    # Staff cannot manage employees.
    assert client.get("/api/employees", headers=staff_headers).status_code == 403

    other_headers = _token(client, other["employee_code"], "secret123")
    assert client.get("/api/customers", headers=other_headers).json() == []
    resp = client.delete(f"/api/customers/{customer['id']}", headers=other_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "authorization_error"

    resp = client.patch(f"/api/customers/{customer['id']}", json={"mobile": "555", "created_by": other["id"]}, headers=staff_headers)
    assert resp.status_code == 200
    assert resp.json()["created_by"] == staff["id"]

    assert client.delete(f"/api/customers/{customer['id']}", headers=staff_headers).status_code == 200
