"""Order aggregate: Order, OrderItem, ShippingAddress, OrderStatusHistory.

Orders are never deleted; customer, courier and product references are
protected so sales history stays resolvable.  Money values are stored
with two decimals (PEN).
"""

from __future__ import annotations

import secrets
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_NUMBER_MAX_RETRIES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    external_status,
)

ZERO = Decimal("0.00")


def _order_number_candidate() -> str:
    return f"ORD-{timezone.localtime():%Y%m%d}-{secrets.token_hex(3).upper()}"


class Order(BaseModel):
    """A customer purchase.

    ``order_number`` (``ORD-YYYYMMDD-XXXXXX``) is what people quote on the
    phone; the UUID ``id`` is what the API routes on.  Totals are derived
    from the items when the order is created and not recomputed later.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders"
    )
    courier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="deliveries",
        null=True,
        blank=True,
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["courier", "status"], name="orders_courier_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def display_status(self) -> str:
        return external_status(self.status)

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def save(self, *args, **kwargs) -> None:
        if not self.order_number:
            self.order_number = self._unique_order_number()
        super().save(*args, **kwargs)

    @classmethod
    def _unique_order_number(cls) -> str:
        for _ in range(ORDER_NUMBER_MAX_RETRIES):
            candidate = _order_number_candidate()
            if not cls.objects.filter(order_number=candidate).exists():
                return candidate
        raise RuntimeError(
            f"No free order number after {ORDER_NUMBER_MAX_RETRIES} attempts."
        )


class OrderItem(BaseModel):
    """One product line; ``unit_price`` is frozen at checkout."""

    order = models.ForeignKey(
        "orders.Order", on_delete=models.CASCADE, related_name="items"
    )
    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="order_items"
    )
    quantity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)]
    )
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product} x{self.quantity} (S/ {self.subtotal})"

    def save(self, *args, **kwargs) -> None:
        self.subtotal = self.quantity * self.unit_price
        super().save(*args, **kwargs)


class ShippingAddress(BaseModel):
    """Where to deliver; captured once at checkout, all fields free text."""

    order = models.OneToOneField(
        "orders.Order", on_delete=models.CASCADE, related_name="shipping_address"
    )
    address_line = models.CharField(max_length=255, blank=True, default="")
    district = models.CharField(max_length=100, blank=True, default="")
    city = models.CharField(max_length=100, default="Lima")
    reference = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "order_shipping_addresses"

    def __str__(self) -> str:
        return ", ".join(
            part for part in (self.address_line, self.district, self.city) if part
        )


class OrderStatusHistory(BaseModel):
    """Append-only audit trail.

    One row per status change or courier assignment.  ``old_status`` is
    empty for the creation entry; ``changed_by`` is empty for system
    changes or when the acting user was removed.
    """

    order = models.ForeignKey(
        "orders.Order", on_delete=models.CASCADE, related_name="status_history"
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20, choices=OrderStatus.choices, null=True, blank=True
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["order", "-created_at"], name="osh_order_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}: {self.old_status or '-'} -> {self.new_status}"
