"""Unit tests for the role projection on ``User``.

Covers:
- role code → role mapping (1 admin, 35 courier, anything else customer).
- ``assign_role`` writes the configured code back.
- codes come from settings.
"""

from __future__ import annotations

import pytest

from modules.accounts.constants import Role
from modules.accounts.models import User

pytestmark = pytest.mark.unit


class TestRoleFromCode:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (1, Role.ADMIN),
            (35, Role.COURIER),
            (2, Role.CUSTOMER),
            (0, Role.CUSTOMER),
            (99, Role.CUSTOMER),
            (None, Role.CUSTOMER),
        ],
    )
    def test_default_mapping(self, code, expected):
        assert Role.from_code(code) == expected

    def test_codes_follow_settings(self, settings):
        settings.ROLE_ID_COURIER = 7
        assert Role.from_code(7) == Role.COURIER
        assert Role.from_code(35) == Role.CUSTOMER
        assert Role.COURIER.to_code() == 7


class TestUserRole:
    def test_new_user_defaults_to_customer(self):
        user = User.objects.create_user(username="nuevo", password="x" * 10)
        assert user.role_id == 2
        assert user.role == Role.CUSTOMER
        assert not user.is_admin
        assert not user.is_courier

    def test_assign_role_courier(self):
        user = User(username="moto")
        user.assign_role(Role.COURIER)
        assert user.role_id == 35
        assert user.is_courier

    def test_assign_role_accepts_plain_value(self):
        user = User(username="jefe")
        user.assign_role("ADMIN")
        assert user.role_id == 1
        assert user.is_admin

    def test_role_is_persisted_as_code(self, courier):
        courier.refresh_from_db()
        assert courier.role_id == 35
        assert courier.role == Role.COURIER
