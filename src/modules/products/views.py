"""Catalog API.

Reads are public so the storefront can browse without an account;
every write, including restocking, needs the admin role.  Non-admins
never see inactive products in listings.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdmin
from modules.products.dtos import CreateProductDTO, RestockDTO, UpdateProductDTO
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.inventory import InventoryService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer, RestockSerializer
from modules.products.services import ProductService

DTO = TypeVar("DTO")

_UPDATABLE = ("name", "price", "description", "category", "is_active")


def _not_found() -> Response:
    return Response({"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND)


def _build(factory: Callable[..., DTO], **fields) -> DTO | Response:
    """Build a DTO, or the 400 response describing why it is invalid."""
    try:
        return factory(**fields)
    except (PydanticValidationError, ValueError) as exc:
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class ProductViewSet(ListModelMixin, GenericViewSet):
    """List comes from ``ListModelMixin`` (filters + pagination); the rest
    goes through ``ProductService`` / ``InventoryService``."""

    serializer_class = ProductSerializer
    queryset = Product.objects.alive()
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    search_fields = ["name", "sku", "description"]
    ordering_fields = ["name", "price", "stock", "created_at"]
    ordering = ["name", "id"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = ProductDjangoRepository()
        self._service = ProductService(repository=repository)
        self._inventory = InventoryService(repository=repository)

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAdmin()]

    def get_queryset(self):
        queryset = Product.objects.alive()
        user = self.request.user
        if user.is_authenticated and user.is_admin:
            return queryset
        return queryset.filter(is_active=True)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data
        dto = _build(
            CreateProductDTO,
            sku=data.get("sku", ""),
            name=data.get("name", ""),
            price=data.get("price", 0),
            description=data.get("description", ""),
            stock=data.get("stock", 0),
            category=data.get("category", "OTHER"),
            is_active=data.get("is_active", True),
        )
        if isinstance(dto, Response):
            return dto

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        ``stock`` is not accepted here; it only moves through checkout and
        ``/restock/``.
        """
        dto = _build(
            UpdateProductDTO, **{field: request.data.get(field) for field in _UPDATABLE}
        )
        if isinstance(dto, Response):
            return dto

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/ (soft delete)."""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def restock(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/restock/ with ``{"quantity": N}``."""
        serializer = RestockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = RestockDTO(**serializer.validated_data)

        try:
            product = self._inventory.restock(pk, dto.quantity)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)
