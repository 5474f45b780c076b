"""Account domain exceptions.

Raised by the Service Layer; views translate them into HTTP responses.
"""

from __future__ import annotations


class UserNotFound(Exception):
    """The referenced user does not exist."""


class UserAlreadyExists(Exception):
    """Username or email already registered."""


class InvalidRole(Exception):
    """The user does not hold the role the operation requires."""

    def __init__(self, user, expected_role) -> None:
        self.user = user
        self.expected_role = expected_role
        super().__init__(
            f"User {user.username} has role {user.role}, expected {expected_role}."
        )


class UnknownRole(Exception):
    """The role name matches none of ``Role``."""


class RoleChangeDenied(Exception):
    """An administrator tried to change their own role."""
