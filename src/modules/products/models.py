"""Pharmacy catalog."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel


class ProductCategory(models.TextChoices):
    MEDICINE = "MEDICINE", "Medicamento"
    COSMETIC = "COSMETIC", "Cosmético"
    HYGIENE = "HYGIENE", "Higiene personal"
    SUPPLEMENT = "SUPPLEMENT", "Suplemento"
    OTHER = "OTHER", "Otro"


class Product(SoftDeleteModel):
    """A sellable item.

    ``stock`` belongs to the inventory ledger (``InventoryService``); the
    ``products_stock_non_negative`` constraint is the last line behind its
    conditional decrement.  SKUs are stored upper-cased.
    """

    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    stock = models.PositiveIntegerField(default=0)
    category = models.CharField(
        max_length=20, choices=ProductCategory.choices, default=ProductCategory.OTHER
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="products_category_idx"),
            models.Index(fields=["is_active"], name="products_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0), name="products_price_positive"
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0), name="products_stock_non_negative"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"

    def save(self, *args, **kwargs) -> None:
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_sellable(self) -> bool:
        return self.is_active and not self.is_deleted
