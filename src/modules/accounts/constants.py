"""Account roles.

The database stores an integer ``role_id`` (legacy category code); the
``Role`` enum is a projection of that code.  The code table lives in
settings (``ROLE_ID_ADMIN``, ``ROLE_ID_COURIER``, ``ROLE_ID_CUSTOMER``).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.accounts.exceptions import UnknownRole


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Administrador"
    CUSTOMER = "CUSTOMER", "Cliente"
    COURIER = "COURIER", "Repartidor"

    @classmethod
    def from_code(cls, code: int | None) -> Role:
        """Map a stored ``role_id`` to a role; unknown codes are customers."""
        if code == settings.ROLE_ID_ADMIN:
            return cls.ADMIN
        if code == settings.ROLE_ID_COURIER:
            return cls.COURIER
        return cls.CUSTOMER

    def to_code(self) -> int:
        if self is Role.ADMIN:
            return settings.ROLE_ID_ADMIN
        if self is Role.COURIER:
            return settings.ROLE_ID_COURIER
        return settings.ROLE_ID_CUSTOMER


def default_role_id() -> int:
    return settings.ROLE_ID_CUSTOMER


def parse_role(value: str | None) -> Role:
    """Resolve a client-supplied role name, case-insensitively.

    Raises:
        UnknownRole: the name matches no role.
    """
    name = str(value or "").strip().upper()
    try:
        return Role(name)
    except ValueError:
        raise UnknownRole(f"Unknown role '{value}'.") from None
