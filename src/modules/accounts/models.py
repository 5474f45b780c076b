"""User model with a role projected from an integer role code.

- ``role_id`` keeps the numeric category used by the legacy database
  (1 = admin, 35 = courier, anything else = customer by default).
- ``role`` is computed on read; write it through ``assign_role``.
- Users are referenced by orders with PROTECT, so accounts with order
  history can only be deactivated (``is_active``), never removed.
"""

from __future__ import annotations

import uuid6
from django.contrib.auth.models import AbstractUser
from django.db import models

from modules.accounts.constants import Role, default_role_id


class User(AbstractUser):
    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    role_id = models.PositiveSmallIntegerField(default=default_role_id)
    phone = models.CharField(max_length=20, blank=True, default="")

    class Meta(AbstractUser.Meta):
        db_table = "users"
        indexes = [
            models.Index(fields=["role_id"], name="users_role_idx"),
        ]

    # ------------------------------------------------------------------
    # Role projection
    # ------------------------------------------------------------------

    @property
    def role(self) -> Role:
        return Role.from_code(self.role_id)

    def assign_role(self, role: Role) -> None:
        self.role_id = Role(role).to_code()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_courier(self) -> bool:
        return self.role == Role.COURIER

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
