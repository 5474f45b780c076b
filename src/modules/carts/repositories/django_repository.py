"""Django ORM implementation of the Cart repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.carts.models import Cart, CartItem
from modules.carts.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


class CartDjangoRepository(ICartRepository):
    """Concrete Cart repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Cart]:
        try:
            return Cart.objects.prefetch_related("items__product").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Cart]:
        queryset = Cart.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def save(self, entity: Cart) -> Cart:
        entity.save()
        return entity

    def get_or_create_for_user(self, user) -> Cart:
        cart, created = Cart.objects.get_or_create(user=user)
        if created:
            logger.info("cart.created", cart_id=str(cart.id), user_id=str(user.id))
        return cart

    def get_item(self, cart: Cart, product_id: str) -> Optional[CartItem]:
        try:
            return (
                CartItem.objects.select_related("product")
                .filter(cart=cart, product_id=product_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_items(self, cart: Cart) -> List[CartItem]:
        return list(
            CartItem.objects.select_related("product")
            .filter(cart=cart)
            .order_by("product_id")
        )

    def save_item(self, item: CartItem) -> CartItem:
        item.save()
        return item

    def delete_item(self, item: CartItem) -> None:
        item.delete()

    def clear(self, cart: Cart) -> int:
        deleted, _ = CartItem.objects.filter(cart=cart).delete()
        return deleted
