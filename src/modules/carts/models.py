"""Shopping cart models.

- One cart per user, created lazily on first access.
- At most one line per product (``UniqueConstraint`` on cart + product).
- Line quantity is always >= 1; a line that would reach zero is removed.
- Totals are computed from live product prices and are display-only;
  checkout snapshots prices into order lines.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Cart(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart",
    )

    class Meta:
        db_table = "carts"

    @property
    def total(self) -> Decimal:
        return sum(
            (item.subtotal for item in self.items.all()),
            Decimal("0.00"),
        )

    @property
    def total_units(self) -> int:
        return sum(item.quantity for item in self.items.all())

    def __str__(self) -> str:
        return f"Cart of {self.user_id}"


class CartItem(BaseModel):
    cart = models.ForeignKey(
        "carts.Cart",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="cart_items",
    )
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "cart_items"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"],
                name="cart_items_unique_product",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="cart_items_quantity_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

    def __str__(self) -> str:
        return f"{self.product} x{self.quantity}"
