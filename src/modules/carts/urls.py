"""Cart URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.carts.views import CartItemDetailView, CartItemsView, CartView

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/items/", CartItemsView.as_view(), name="cart-items"),
    path(
        "cart/items/<uuid:product_id>/",
        CartItemDetailView.as_view(),
        name="cart-item-detail",
    ),
]
