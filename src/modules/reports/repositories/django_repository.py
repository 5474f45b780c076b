"""Django ORM implementation of the Report repository."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count

from modules.accounts.models import User
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.products.models import Product
from modules.reports.models import WeeklySalesReport, WeeklySalesReportItem
from modules.reports.repositories.interfaces import IReportRepository

logger = structlog.get_logger(__name__)


class ReportDjangoRepository(IReportRepository):
    """Concrete report repository backed by Django ORM."""

    def _queryset(self):
        return WeeklySalesReport.objects.select_related(
            "best_selling_product"
        ).prefetch_related("items__product")

    def get_by_id(self, id: str) -> Optional[WeeklySalesReport]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_period_key(self, period_key: str) -> Optional[WeeklySalesReport]:
        return self._queryset().filter(period_key=period_key).first()

    def exists_period_key(self, period_key: str) -> bool:
        return WeeklySalesReport.objects.filter(period_key=period_key).exists()

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[WeeklySalesReport]:
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_year(self, year: int) -> List[WeeklySalesReport]:
        return list(self._queryset().filter(period_key__startswith=f"{year}-W"))

    def list_latest(self, limit: int) -> List[WeeklySalesReport]:
        return list(self._queryset().order_by("-week_start")[:limit])

    def save(self, entity: WeeklySalesReport) -> WeeklySalesReport:
        entity.save()
        return entity

    @transaction.atomic
    def create_with_items(
        self, data: Dict[str, Any], items: List[Dict[str, Any]]
    ) -> WeeklySalesReport:
        report = WeeklySalesReport.objects.create(**data)
        WeeklySalesReportItem.objects.bulk_create(
            [WeeklySalesReportItem(report=report, **item) for item in items]
        )
        logger.info(
            "report.persisted",
            report_id=str(report.id),
            period_key=report.period_key,
            item_count=len(items),
        )
        return self.get_by_id(str(report.id)) or report

    def delivered_orders_between(self, start: date, end: date) -> List[Order]:
        return list(
            Order.objects.filter(
                status=OrderStatus.DELIVERED,
                created_at__date__range=(start, end),
            )
            .prefetch_related("items__product")
            .order_by("created_at")
        )

    def count_orders_by_status(self) -> Dict[str, int]:
        rows = Order.objects.order_by().values("status").annotate(total=Count("id"))
        return {row["status"]: row["total"] for row in rows}

    def count_users_by_role_id(self) -> Dict[int, int]:
        rows = User.objects.order_by().values("role_id").annotate(total=Count("id"))
        return {row["role_id"]: row["total"] for row in rows}

    def count_live_products(self) -> int:
        return Product.objects.alive().count()

    def low_stock_products(self, threshold: int, limit: int) -> List[Product]:
        return list(
            Product.objects.alive()
            .filter(is_active=True, stock__lte=threshold)
            .order_by("stock", "name")[:limit]
        )

    def latest_orders(self, limit: int) -> List[Order]:
        return list(
            Order.objects.select_related("user").order_by("-created_at", "-id")[:limit]
        )
