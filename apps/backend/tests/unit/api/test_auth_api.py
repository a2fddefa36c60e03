"""
Name: Auth + Users HTTP Tests

Responsibilities:
  - Register / login / me contracts (JWT Bearer, camelCase payloads)
  - RFC 7807 error bodies for 401 / 403 / 409 / 422
  - Password recovery over HTTP (generic message, token consumed once)
  - Users panel gated by capabilities
"""

from urllib.parse import parse_qs, urlparse

import pytest
from tienda.application.usecases.auth import RESET_REQUESTED_MESSAGE
from tienda.container import get_email_sender, get_user_repository
from tienda.identity.users import UserRole

pytestmark = pytest.mark.unit


def _register(client, email="ana@example.com", password="secret123", name="Ana"):
    return client.post(
        "/api/auth/register", json={"email": email, "password": password, "name": name}
    )


class TestRegisterLogin:
    def test_register_returns_token_and_user(self, client):
        response = _register(client, email="Ana@Example.com")

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["tokenType"] == "bearer"
        assert body["expiresIn"] > 0
        assert body["user"]["email"] == "ana@example.com"
        assert body["user"]["role"] == "user"
        assert "passwordHash" not in body["user"]

    def test_register_twice_conflicts(self, client):
        _register(client)

        response = _register(client)

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "CONFLICT"
        assert response.headers["content-type"].startswith("application/problem+json")

    def test_register_without_password_is_422(self, client):
        response = client.post("/api/auth/register", json={"email": "a@b.com"})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_login_and_me(self, client):
        _register(client)

        login = client.post(
            "/api/auth/login", json={"email": "ANA@example.com", "password": "secret123"}
        )
        token = login.json()["token"]
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert login.status_code == 200
        assert me.status_code == 200
        assert me.json()["user"]["name"] == "Ana"

    def test_login_wrong_password(self, client):
        _register(client)

        response = client.post(
            "/api/auth/login", json={"email": "ana@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert "Credenciales" in response.json()["detail"]

    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert "token" in response.json()["detail"].lower()

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer abc"})

        assert response.status_code == 401

    def test_role_is_read_from_storage_not_token(self, client, customer, auth_headers):
        headers = auth_headers(customer)
        get_user_repository().update_role(customer.id, UserRole.ADMIN)

        response = client.get("/api/users", headers=headers)

        assert response.status_code == 200


class TestAccount:
    def test_profile_and_change_password(self, client, customer, auth_headers):
        headers = auth_headers(customer)

        profile = client.put(
            "/api/auth/profile",
            headers=headers,
            json={"name": "Ana", "phone": "1155", "address": {"city": "Rosario", "postalCode": "2000"}},
        )
        changed = client.put(
            "/api/auth/change-password",
            headers=headers,
            json={"currentPassword": "secret123", "newPassword": "nuevo123"},
        )
        login = client.post(
            "/api/auth/login", json={"email": customer.email, "password": "nuevo123"}
        )

        assert profile.status_code == 200
        assert profile.json()["user"]["address"]["postalCode"] == "2000"
        assert changed.status_code == 200
        assert login.status_code == 200

    def test_password_recovery_flow(self, client, customer):
        unknown = client.post("/api/auth/forgot-password", json={"email": "x@example.com"})
        known = client.post("/api/auth/forgot-password", json={"email": customer.email})

        assert unknown.json()["message"] == known.json()["message"] == RESET_REQUESTED_MESSAGE

        html = get_email_sender().sent[-1].html
        link = html.split('href="', 1)[1].split('"', 1)[0]
        token = parse_qs(urlparse(link).query)["token"][0]

        first = client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "nuevo123"}
        )
        second = client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "otro1234"}
        )

        assert first.status_code == 200
        assert second.status_code == 400


class TestUsersPanel:
    def test_customer_cannot_list_users(self, client, customer, auth_headers):
        response = client.get("/api/users", headers=auth_headers(customer))

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_admin_lists_users_on_both_mounts(self, client, admin, customer, auth_headers):
        headers = auth_headers(admin)

        plain = client.get("/api/users", headers=headers)
        nested = client.get("/api/auth/users", headers=headers)

        assert plain.status_code == nested.status_code == 200
        emails = {u["email"] for u in plain.json()["users"]}
        assert {admin.email, customer.email} <= emails

    def test_admin_assigns_admin_role(self, client, admin, customer, auth_headers):
        response = client.put(
            f"/api/users/{customer.id}/role",
            headers=auth_headers(admin),
            json={"role": "admin"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"
        assert response.json()["previousRole"] == "user"

    def test_admin_cannot_grant_developer(self, client, admin, customer, auth_headers):
        response = client.put(
            f"/api/users/{customer.id}/role",
            headers=auth_headers(admin),
            json={"role": "developer"},
        )

        assert response.status_code == 403

    def test_self_role_change_is_forbidden(self, client, developer, auth_headers):
        response = client.put(
            f"/api/users/{developer.id}/role",
            headers=auth_headers(developer),
            json={"role": "user"},
        )

        assert response.status_code == 403

    def test_unknown_role_is_422(self, client, developer, customer, auth_headers):
        response = client.put(
            f"/api/users/{customer.id}/role",
            headers=auth_headers(developer),
            json={"role": "root"},
        )

        assert response.status_code == 422

    def test_admin_password_reset(self, client, admin, customer, auth_headers):
        response = client.put(
            f"/api/users/{customer.id}/reset-password", headers=auth_headers(admin)
        )
        login = client.post(
            "/api/auth/login", json={"email": customer.email, "password": "1234abcd"}
        )

        assert response.status_code == 200
        assert response.json()["temporaryPassword"] == "1234abcd"
        assert login.status_code == 200
