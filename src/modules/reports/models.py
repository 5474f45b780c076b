"""Weekly sales report models.

A report is identified by its ISO week (``period_key``, e.g.
``2025-W03``); the unique constraint on that key makes generation
idempotent.  Reports are snapshots: once written they are never
recomputed, even if orders of that week change status later.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.core.models import BaseModel
from modules.products.models import ProductCategory


class WeeklySalesReport(BaseModel):
    period_key = models.CharField(max_length=10, unique=True)
    week_start = models.DateField()
    week_end = models.DateField()
    total_orders = models.PositiveIntegerField(default=0)
    total_units = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    best_selling_product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    best_selling_category = models.CharField(
        max_length=20,
        choices=ProductCategory.choices,
        blank=True,
        default="",
    )

    class Meta:
        db_table = "weekly_sales_reports"
        ordering = ["-week_start"]

    def __str__(self) -> str:
        return f"{self.period_key} ({self.week_start} - {self.week_end})"


class WeeklySalesReportItem(BaseModel):
    """Units and revenue of one product within a weekly report."""

    report = models.ForeignKey(
        "reports.WeeklySalesReport",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="+",
    )
    units_sold = models.PositiveIntegerField()
    revenue = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "weekly_sales_report_items"
        ordering = ["-units_sold", "product_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["report", "product"],
                name="report_items_unique_product",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.report.period_key}: {self.product_id} x{self.units_sold}"
