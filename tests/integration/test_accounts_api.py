"""Integration tests for the account endpoints.

Covers:
- public customer registration (201, 409 on duplicates, 400 on bad input).
- JWT token issue for a registered user.
- ``/users/me/`` projects the role from ``role_id``.
- courier directory is admin-only.
- admin role changes, listings and counts by role.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.accounts.models import User

pytestmark = pytest.mark.integration

REGISTER_URL = "/api/v1/auth/register/"


class TestRegister:
    def test_registers_customer(self, api_client):
        response = api_client.post(
            REGISTER_URL,
            {"username": "rosa", "password": "segura123", "phone": "+51 987 654 321"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["role"] == "CUSTOMER"
        assert response.data["role_id"] == 2
        assert "password" not in response.data
        assert User.objects.get(username="rosa").check_password("segura123")

    def test_duplicate_username(self, api_client, customer):
        response = api_client.post(
            REGISTER_URL,
            {"username": "cliente", "password": "segura123"},
            format="json",
        )

        assert response.status_code == 409

    def test_short_password(self, api_client):
        response = api_client.post(
            REGISTER_URL, {"username": "rosa", "password": "123"}, format="json"
        )

        assert response.status_code == 400
        assert not User.objects.filter(username="rosa").exists()

    def test_registered_user_obtains_token(self, api_client):
        api_client.post(
            REGISTER_URL,
            {"username": "rosa", "password": "segura123"},
            format="json",
        )

        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "rosa", "password": "segura123"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = api_client.get("/api/v1/users/me/")
        assert me.status_code == 200
        assert me.data["username"] == "rosa"


class TestMe:
    @pytest.mark.parametrize(
        ("user_fixture", "role", "role_id"),
        [
            ("admin_user", "ADMIN", 1),
            ("courier", "COURIER", 35),
            ("customer", "CUSTOMER", 2),
        ],
    )
    def test_role_projection(self, client_for, request, user_fixture, role, role_id):
        user = request.getfixturevalue(user_fixture)

        response = client_for(user).get("/api/v1/users/me/")

        assert response.status_code == 200
        assert response.data["role"] == role
        assert response.data["role_id"] == role_id

    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/v1/users/me/").status_code == 401


class TestCouriers:
    def test_admin_lists_couriers(self, client_for, admin_user, courier, customer):
        response = client_for(admin_user).get("/api/v1/users/couriers/")

        assert response.status_code == 200
        assert [row["username"] for row in response.data] == ["repartidor"]

    @pytest.mark.parametrize("user_fixture", ["customer", "courier"])
    def test_forbidden_for_non_admins(self, client_for, request, user_fixture):
        user = request.getfixturevalue(user_fixture)

        response = client_for(user).get("/api/v1/users/couriers/")

        assert response.status_code == 403


class TestRoleManagement:
    def test_admin_changes_role(self, client_for, admin_user, customer):
        response = client_for(admin_user).patch(
            f"/api/v1/users/{customer.id}/role/", {"role": "courier"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["role"] == "COURIER"
        assert response.data["role_id"] == 35
        customer.refresh_from_db()
        assert customer.is_courier

    def test_unknown_role(self, client_for, admin_user, customer):
        response = client_for(admin_user).patch(
            f"/api/v1/users/{customer.id}/role/", {"role": "GERENTE"}, format="json"
        )

        assert response.status_code == 400
        customer.refresh_from_db()
        assert customer.role_id == 2

    def test_missing_role(self, client_for, admin_user, customer):
        response = client_for(admin_user).patch(
            f"/api/v1/users/{customer.id}/role/", {}, format="json"
        )

        assert response.status_code == 400

    def test_unknown_user(self, client_for, admin_user):
        response = client_for(admin_user).patch(
            f"/api/v1/users/{uuid4()}/role/", {"role": "COURIER"}, format="json"
        )

        assert response.status_code == 404

    def test_own_role_rejected(self, client_for, admin_user):
        response = client_for(admin_user).patch(
            f"/api/v1/users/{admin_user.id}/role/", {"role": "CUSTOMER"}, format="json"
        )

        assert response.status_code == 400
        admin_user.refresh_from_db()
        assert admin_user.is_admin

    @pytest.mark.parametrize("user_fixture", ["customer", "courier"])
    def test_non_admins_forbidden(self, client_for, request, user_fixture, customer):
        user = request.getfixturevalue(user_fixture)

        response = client_for(user).patch(
            f"/api/v1/users/{customer.id}/role/", {"role": "ADMIN"}, format="json"
        )

        assert response.status_code == 403
        customer.refresh_from_db()
        assert customer.role_id == 2

    def test_lists_users_by_role(self, client_for, admin_user, courier, customer):
        response = client_for(admin_user).get("/api/v1/users/role/customer/")

        assert response.status_code == 200
        assert [row["username"] for row in response.data] == ["cliente"]

    def test_counts_users_by_role(self, client_for, admin_user, courier, other_courier):
        response = client_for(admin_user).get("/api/v1/users/role/COURIER/count/")

        assert response.status_code == 200
        assert response.data == {"role": "COURIER", "count": 2}

    def test_list_unknown_role(self, client_for, admin_user):
        response = client_for(admin_user).get("/api/v1/users/role/GERENTE/")

        assert response.status_code == 400

    def test_role_listing_forbidden_for_customers(self, client_for, customer):
        response = client_for(customer).get("/api/v1/users/role/CUSTOMER/")

        assert response.status_code == 403
