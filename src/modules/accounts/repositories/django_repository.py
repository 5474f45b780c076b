"""Django ORM implementation of the User repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import Q

from modules.accounts.models import User
from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    """Concrete User repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[User]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return User.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_username(self, username: str) -> Optional[User]:
        return User.objects.filter(username=username).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[User]:
        queryset = User.objects.all().order_by("username")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_role_id(
        self, role_id: int, active_only: bool = True
    ) -> List[User]:
        queryset = User.objects.filter(role_id=role_id)
        if active_only:
            queryset = queryset.filter(is_active=True)
        return list(queryset.order_by("username"))

    def count_by_role_id(self, role_id: int) -> int:
        return User.objects.filter(role_id=role_id).count()

    def exists(self, username: str, email: str) -> bool:
        condition = Q(username=username)
        if email:
            condition |= Q(email__iexact=email)
        return User.objects.filter(condition).exists()

    def save(self, entity: User) -> User:
        entity.save()
        logger.info("user.saved", user_id=str(entity.id), role=str(entity.role))
        return entity
