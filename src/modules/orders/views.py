"""HTTP surface for checkout, order tracking and courier dispatch.

Domain errors raised by ``OrderService`` map to responses through
``_ERROR_STATUS``; anything else propagates to DRF.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.exceptions import InvalidRole, UserNotFound
from modules.accounts.permissions import IsAdmin, IsAdminOrCourier, IsCourier
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.services import UserService
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.constants import OrderStatus
from modules.orders.dtos import ShippingDataDTO
from modules.orders.exceptions import (
    EmptyCart,
    InvalidStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AssignCourierSerializer,
    CheckoutSerializer,
    DeliveryStatsSerializer,
    OrderListSerializer,
    OrderSerializer,
    StatusUpdateSerializer,
)
from modules.orders.services import OrderService
from modules.products.exceptions import (
    InactiveProduct,
    InsufficientStock,
    ProductNotFound,
)
from modules.products.repositories.django_repository import ProductDjangoRepository

_ERROR_STATUS = {
    EmptyCart: status.HTTP_400_BAD_REQUEST,
    InactiveProduct: status.HTTP_400_BAD_REQUEST,
    InsufficientStock: status.HTTP_400_BAD_REQUEST,
    InvalidStatus: status.HTTP_400_BAD_REQUEST,
    InvalidRole: status.HTTP_400_BAD_REQUEST,
    OrderAccessDenied: status.HTTP_403_FORBIDDEN,
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    ProductNotFound: status.HTTP_404_NOT_FOUND,
    UserNotFound: status.HTTP_404_NOT_FOUND,
}
_HANDLED = tuple(_ERROR_STATUS)

_PERMISSIONS = {
    "partial_update": IsAdmin,
    "assign_courier": IsAdmin,
    "unassigned": IsAdmin,
    "my_deliveries": IsCourier,
    "delivery_stats": IsCourier,
    "delivery_status": IsCourier,
    "by_courier": IsAdminOrCourier,
}


def _error(exc: Exception) -> Response:
    code = next(code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls))
    detail = "Order not found." if isinstance(exc, OrderNotFound) else str(exc)
    return Response({"detail": detail}, status=code)


class OrderViewSet(GenericViewSet):
    """Customers see their own orders; admins see all of them."""

    queryset = Order.objects.all()
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = OrderFilter
    search_fields = ["order_number", "user__username"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            cart_repository=CartDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        self._users = UserService(repository=UserDjangoRepository())

    def get_permissions(self):
        return [_PERMISSIONS.get(self.action, IsAuthenticated)()]

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "checkout" if self.action == "create" else None
        return super().get_throttles()

    def get_queryset(self):
        queryset = Order.objects.select_related("user", "courier")
        if getattr(self, "swagger_fake_view", False):
            return queryset.none()
        if self.request.user.is_admin:
            return queryset
        return queryset.filter(user=self.request.user)

    def _page(self, request: Request, orders) -> Response:
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, request, view=self)
        return paginator.get_paginated_response(
            OrderListSerializer(page, many=True).data
        )

    def create(self, request: Request) -> Response:
        """Check out the caller's cart."""
        payload = CheckoutSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.create_order_from_cart(
                request.user, ShippingDataDTO(**payload.validated_data)
            )
        except _HANDLED as exc:
            return _error(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        return self._page(request, self.filter_queryset(self.get_queryset()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            order = self._service.get_order_for_user(pk, request.user)
        except _HANDLED as exc:
            return _error(exc)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """Admin status change; body ``{"status": "<token>", "notes": ""}``."""
        payload = StatusUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.update_status(
                order_id=pk,
                token=payload.validated_data["status"],
                changed_by=request.user,
                notes=payload.validated_data["notes"],
            )
        except _HANDLED as exc:
            return _error(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch"], url_path="assign-courier")
    def assign_courier(self, request: Request, pk: str | None = None) -> Response:
        payload = AssignCourierSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            courier_id = str(payload.validated_data["courier_id"])
            courier = self._users.get_user_by_id(courier_id)
            order = self._service.assign_courier(pk, courier, assigned_by=request.user)
        except _HANDLED as exc:
            return _error(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"])
    def unassigned(self, request: Request) -> Response:
        """Dispatch queue; ``?status=`` defaults to PENDING."""
        try:
            orders = self._service.get_unassigned_orders(
                request.query_params.get("status", OrderStatus.PENDING)
            )
        except _HANDLED as exc:
            return _error(exc)
        return self._page(request, orders)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"courier/(?P<courier_id>[0-9a-fA-F-]{32,36})",
    )
    def by_courier(self, request: Request, courier_id: str | None = None) -> Response:
        if not request.user.is_admin and str(request.user.id) != str(courier_id):
            return Response(
                {"detail": "You can only list your own deliveries."},
                status=status.HTTP_403_FORBIDDEN,
            )
        try:
            courier = self._users.get_user_by_id(courier_id)
        except _HANDLED as exc:
            return _error(exc)
        return self._page(request, self._service.get_orders_by_courier(courier))

    @action(detail=False, methods=["get"], url_path="my-deliveries")
    def my_deliveries(self, request: Request) -> Response:
        return self._page(request, self._service.get_orders_by_courier(request.user))

    @action(detail=False, methods=["get"], url_path="delivery-stats")
    def delivery_stats(self, request: Request) -> Response:
        stats = self._service.get_delivery_stats(request.user)
        return Response(DeliveryStatsSerializer(stats.model_dump()).data)

    @action(detail=True, methods=["patch"], url_path="delivery-status")
    def delivery_status(self, request: Request, pk: str | None = None) -> Response:
        """Status change by the courier the order is assigned to."""
        payload = StatusUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            order = self._service.update_delivery_status(
                pk,
                request.user,
                payload.validated_data["status"],
                notes=payload.validated_data["notes"],
            )
        except _HANDLED as exc:
            return _error(exc)
        return Response(OrderSerializer(order).data)
