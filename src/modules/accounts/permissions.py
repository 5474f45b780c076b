"""Role-based DRF permissions.

Roles are projected from ``User.role_id``; Django's ``is_staff`` flag
only governs the admin site.
"""

from __future__ import annotations

from rest_framework.permissions import BasePermission


class IsAdmin(BasePermission):
    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)


class IsCourier(BasePermission):
    message = "Courier role required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_courier)


class IsAdminOrCourier(BasePermission):
    message = "Administrator or courier role required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(
            user and user.is_authenticated and (user.is_admin or user.is_courier)
        )
