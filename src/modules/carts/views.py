"""Cart API views.

All endpoints act on the authenticated user's own cart.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.carts.dtos import AddCartItemDTO, RemoveCartItemDTO
from modules.carts.exceptions import CartItemNotFound
from modules.carts.models import Cart
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.carts.serializers import (
    AddCartItemSerializer,
    CartSerializer,
    RemoveCartItemSerializer,
)
from modules.carts.services import CartService
from modules.products.exceptions import (
    InactiveProduct,
    InsufficientStock,
    ProductNotFound,
)
from modules.products.repositories.django_repository import ProductDjangoRepository


def _cart_service() -> CartService:
    return CartService(
        cart_repository=CartDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _cart_response(cart: Cart, status_code: int = status.HTTP_200_OK) -> Response:
    cart = Cart.objects.prefetch_related("items__product").get(pk=cart.pk)
    return Response(CartSerializer(cart).data, status=status_code)


class CartView(APIView):
    """GET/DELETE /api/v1/cart/"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        cart = _cart_service().get_cart(request.user)
        return _cart_response(cart)

    def delete(self, request: Request) -> Response:
        _cart_service().clear_cart(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemsView(APIView):
    """POST /api/v1/cart/items/"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request) -> Response:
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = AddCartItemDTO(**serializer.validated_data)

        try:
            cart = _cart_service().add_item(request.user, dto.product_id, dto.quantity)
        except ProductNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except (InactiveProduct, InsufficientStock) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return _cart_response(cart, status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    """DELETE /api/v1/cart/items/{product_id}/ (optional ``quantity``)."""

    permission_classes = [IsAuthenticated]

    def delete(self, request: Request, product_id) -> Response:
        serializer = RemoveCartItemSerializer(data=request.query_params or request.data)
        serializer.is_valid(raise_exception=True)
        dto = RemoveCartItemDTO(
            product_id=product_id,
            quantity=serializer.validated_data.get("quantity"),
        )

        try:
            cart = _cart_service().remove_item(
                request.user, dto.product_id, dto.quantity
            )
        except CartItemNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        return _cart_response(cart)
