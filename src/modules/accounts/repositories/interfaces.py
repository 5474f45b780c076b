"""User repository interface.

Extends ``IRepository[User]`` with the look-ups the order and delivery
use-cases need (by username, by role code).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import User


class IUserRepository(IRepository["User"]):
    """Repository contract for users."""

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        """Retrieve a user by username."""

    @abstractmethod
    def list_by_role_id(
        self, role_id: int, active_only: bool = True
    ) -> List[User]:
        """Return users holding the given role code, by username."""

    @abstractmethod
    def count_by_role_id(self, role_id: int) -> int:
        """Number of users (active or not) holding the role code."""

    @abstractmethod
    def exists(self, username: str, email: str) -> bool:
        """Return ``True`` if username or (non-empty) email is taken."""
