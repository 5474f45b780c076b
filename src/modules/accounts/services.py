"""User service layer.

Resolves users for the order, delivery and cart use-cases, handles
customer self-registration and lets administrators move users between
roles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.accounts.constants import Role, parse_role
from modules.accounts.exceptions import (
    RoleChangeDenied,
    UserAlreadyExists,
    UserNotFound,
)
from modules.accounts.models import User

if TYPE_CHECKING:
    from modules.accounts.dtos import RegisterUserDTO
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Application service for User use-cases."""

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    def get_user_by_username(self, username: str) -> User:
        """Raises ``UserNotFound`` when no user has that username."""
        user = self._repo.get_by_username(username)
        if not user:
            raise UserNotFound(f"User '{username}' not found.")
        return user

    def get_user_by_id(self, user_id: str) -> User:
        """Raises ``UserNotFound`` when the id is unknown or malformed."""
        user = self._repo.get_by_id(user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found.")
        return user

    def list_couriers(self) -> List[User]:
        return self._repo.list_by_role_id(Role.COURIER.to_code())

    def list_users_by_role(self, role: str) -> List[User]:
        """Every user holding *role*, inactive accounts included.

        Raises ``UnknownRole`` for names outside ``Role``.
        """
        return self._repo.list_by_role_id(
            parse_role(role).to_code(), active_only=False
        )

    def count_users_by_role(self, role: str) -> int:
        return self._repo.count_by_role_id(parse_role(role).to_code())

    @transaction.atomic
    def change_role(self, user_id: str, role: str, changed_by: User) -> User:
        """Move a user to another role.

        Raises:
            UnknownRole: *role* names no role.
            UserNotFound: unknown or malformed *user_id*.
            RoleChangeDenied: *changed_by* targets their own account.
        """
        new_role = parse_role(role)
        user = self.get_user_by_id(user_id)
        if user.pk == changed_by.pk:
            raise RoleChangeDenied("Administrators cannot change their own role.")

        old_role = user.role
        if old_role == new_role:
            return user

        user.assign_role(new_role)
        user.save(update_fields=["role_id"])
        logger.info(
            "user.role_changed",
            user_id=str(user.id),
            old_role=str(old_role),
            new_role=str(new_role),
            changed_by=str(changed_by.id),
        )
        return user

    @transaction.atomic
    def register_customer(self, dto: RegisterUserDTO) -> User:
        """Create a customer account.

        Raises:
            UserAlreadyExists: username or email already registered.
        """
        log = logger.bind(username=dto.username)
        if self._repo.exists(dto.username, dto.email):
            log.warning("user.duplicate_registration")
            raise UserAlreadyExists(f"User '{dto.username}' already registered.")

        user = User(
            username=dto.username,
            email=dto.email,
            first_name=dto.first_name,
            last_name=dto.last_name,
            phone=dto.phone,
        )
        user.assign_role(Role.CUSTOMER)
        user.set_password(dto.password)
        user = self._repo.save(user)
        log.info("user.registered", user_id=str(user.id))
        return user
