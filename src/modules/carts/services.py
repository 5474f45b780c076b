"""Cart service layer.

Cart lines are not reservations: stock is checked when a line is added
so customers get early feedback, but it is only taken at checkout by the
inventory ledger.  Concurrent edits of the same cart are last-write-wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.carts.exceptions import CartItemNotFound
from modules.carts.models import Cart, CartItem
from modules.products.exceptions import (
    InactiveProduct,
    InsufficientStock,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.carts.repositories.interfaces import ICartRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CartService:
    """Application service for Cart use-cases."""

    def __init__(
        self,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._cart_repo = cart_repository
        self._product_repo = product_repository

    def get_cart(self, user) -> Cart:
        """Return the user's cart, creating it on first access."""
        return self._cart_repo.get_or_create_for_user(user)

    @transaction.atomic
    def add_item(self, user, product_id: str, quantity: int = 1) -> Cart:
        """Add *quantity* units of a product, merging into an existing line.

        Raises:
            ValueError: quantity lower than 1.
            ProductNotFound: the product does not exist.
            InactiveProduct: the product is not for sale.
            InsufficientStock: the resulting line would exceed current stock.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")

        log = logger.bind(user_id=str(user.id), product_id=str(product_id))

        product = self._product_repo.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        if not product.is_sellable:
            raise InactiveProduct(f"Product {product.sku} is not available.")

        cart = self.get_cart(user)
        item = self._cart_repo.get_item(cart, str(product.id))
        requested = quantity + (item.quantity if item else 0)

        if requested > product.stock:
            log.warning(
                "cart.insufficient_stock",
                requested=requested,
                available=product.stock,
            )
            raise InsufficientStock(product, product.stock, requested)

        if item:
            item.quantity = requested
        else:
            item = CartItem(cart=cart, product=product, quantity=requested)
        self._cart_repo.save_item(item)

        log.info("cart.item_added", quantity=quantity, line_quantity=requested)
        return cart

    @transaction.atomic
    def remove_item(
        self, user, product_id: str, quantity: Optional[int] = None
    ) -> Cart:
        """Take *quantity* units off a line; ``None`` removes the line.

        A line whose quantity would drop to zero or below is deleted.

        Raises:
            CartItemNotFound: the cart has no line for that product.
            ValueError: quantity is given and lower than 1.
        """
        if quantity is not None and quantity < 1:
            raise ValueError("Quantity must be at least 1.")

        cart = self.get_cart(user)
        item = self._cart_repo.get_item(cart, str(product_id))
        if not item:
            raise CartItemNotFound(f"Product {product_id} is not in the cart.")

        log = logger.bind(user_id=str(user.id), product_id=str(product_id))

        if quantity is None or item.quantity - quantity <= 0:
            self._cart_repo.delete_item(item)
            log.info("cart.item_removed")
        else:
            item.quantity -= quantity
            self._cart_repo.save_item(item)
            log.info("cart.item_decremented", line_quantity=item.quantity)
        return cart

    @transaction.atomic
    def clear_cart(self, user) -> None:
        cart = self.get_cart(user)
        removed = self._cart_repo.clear(cart)
        logger.info("cart.cleared", user_id=str(user.id), lines=removed)
