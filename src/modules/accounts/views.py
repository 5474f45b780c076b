"""Account API views: registration, the user directory and role management."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import RegisterUserDTO
from modules.accounts.exceptions import (
    RoleChangeDenied,
    UnknownRole,
    UserAlreadyExists,
    UserNotFound,
)
from modules.accounts.models import User
from modules.accounts.permissions import IsAdmin
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import (
    RegisterSerializer,
    RoleUpdateSerializer,
    UserSerializer,
)
from modules.accounts.services import UserService


class RegisterView(APIView):
    """POST /api/v1/auth/register/"""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = RegisterUserDTO(**serializer.validated_data)
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        service = UserService(repository=UserDjangoRepository())
        try:
            user = service.register_customer(dto)
        except UserAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class UserViewSet(GenericViewSet):
    """User directory.

    ``/users/me/`` is open to any authenticated user; the courier list,
    role listings and role changes are admin-only.
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserService(repository=UserDjangoRepository())

    @action(detail=False, methods=["get"])
    def me(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=["get"], permission_classes=[IsAdmin])
    def couriers(self, request: Request) -> Response:
        couriers = self._service.list_couriers()
        return Response(UserSerializer(couriers, many=True).data)

    @action(
        detail=False,
        methods=["get"],
        permission_classes=[IsAdmin],
        url_path=r"role/(?P<role>[A-Za-z_]+)",
    )
    def by_role(self, request: Request, role: str | None = None) -> Response:
        """GET /api/v1/users/role/{role}/"""
        try:
            users = self._service.list_users_by_role(role)
        except UnknownRole as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(UserSerializer(users, many=True).data)

    @action(
        detail=False,
        methods=["get"],
        permission_classes=[IsAdmin],
        url_path=r"role/(?P<role>[A-Za-z_]+)/count",
    )
    def count_by_role(self, request: Request, role: str | None = None) -> Response:
        try:
            total = self._service.count_users_by_role(role)
        except UnknownRole as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"role": role.upper(), "count": total})

    @action(
        detail=True,
        methods=["patch"],
        permission_classes=[IsAdmin],
        url_path="role",
    )
    def change_role(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/users/{id}/role/ with ``{"role": "COURIER"}``."""
        payload = RoleUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            user = self._service.change_role(
                pk, payload.validated_data["role"], changed_by=request.user
            )
        except (UnknownRole, RoleChangeDenied) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except UserNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(UserSerializer(user).data)
