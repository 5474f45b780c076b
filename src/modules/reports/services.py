"""Sales report service layer.

Weekly reports summarise the DELIVERED orders created inside an ISO week
and are stored once per week (``period_key``); later requests for the
same week return the stored snapshot.  Daily profit reports are computed
on every call and never stored, as is the admin dashboard.

Best-seller ties are broken deterministically: most units first, then the
lowest product id (products) or the alphabetically first name
(categories).
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import structlog
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from modules.accounts.constants import Role
from modules.orders.constants import OrderStatus
from modules.reports.dtos import (
    DailyOrderDTO,
    DailyProfitReportDTO,
    DashboardDTO,
    LowStockProductDTO,
    RecentOrderDTO,
)
from modules.reports.exceptions import ReportGenerationError, ReportNotFound

if TYPE_CHECKING:
    from modules.reports.models import WeeklySalesReport
    from modules.reports.repositories.interfaces import IReportRepository

logger = structlog.get_logger(__name__)


def period_key_for(day: date) -> str:
    """ISO week identifier, e.g. ``2025-W03`` (ISO year, not calendar year)."""
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def iso_week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the ISO week containing *day*."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def _best_seller(units_by_key: Dict, tie_key) -> Optional[object]:
    if not units_by_key:
        return None
    return min(units_by_key, key=lambda k: (-units_by_key[k], tie_key(k)))


class SalesReportService:
    """Application service for sales reporting use-cases."""

    def __init__(self, repository: IReportRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Weekly reports
    # ------------------------------------------------------------------

    def generate_weekly_report(self, start: date, end: date) -> WeeklySalesReport:
        """Return the report of the week starting at *start*, building it once.

        Raises:
            ReportGenerationError: *start* is after *end*, or the report
                could not be stored.
        """
        if start > end:
            raise ReportGenerationError(
                f"Invalid range: {start.isoformat()} is after {end.isoformat()}."
            )

        period_key = period_key_for(start)
        log = logger.bind(period_key=period_key)

        existing = self._repo.get_by_period_key(period_key)
        if existing:
            log.info("report.weekly_cache_hit", report_id=str(existing.id))
            return existing

        data, items = self._aggregate(start, end, period_key)

        try:
            with transaction.atomic():
                report = self._repo.create_with_items(data, items)
        except IntegrityError:
            stored = self._repo.get_by_period_key(period_key)
            if stored is None:
                raise
            log.info("report.weekly_concurrent_insert", report_id=str(stored.id))
            return stored
        except DatabaseError as exc:
            log.error("report.weekly_failed", error=str(exc))
            raise ReportGenerationError(
                f"Could not store report {period_key}."
            ) from exc

        log.info(
            "report.weekly_generated",
            report_id=str(report.id),
            total_orders=report.total_orders,
            total_revenue=str(report.total_revenue),
        )
        return report

    def _aggregate(self, start: date, end: date, period_key: str):
        orders = self._repo.delivered_orders_between(start, end)

        total_revenue = Decimal("0.00")
        total_units = 0
        units_by_product: Dict = defaultdict(int)
        revenue_by_product: Dict = defaultdict(lambda: Decimal("0.00"))
        products: Dict = {}
        units_by_category: Dict[str, int] = defaultdict(int)

        for order in orders:
            total_revenue += order.total_amount
            for item in order.items.all():
                total_units += item.quantity
                units_by_product[item.product_id] += item.quantity
                revenue_by_product[item.product_id] += item.subtotal
                products[item.product_id] = item.product
                if item.product.category:
                    units_by_category[item.product.category] += item.quantity

        best_product_id = _best_seller(units_by_product, str)
        best_category = _best_seller(units_by_category, str)

        data = {
            "period_key": period_key,
            "week_start": start,
            "week_end": end,
            "total_orders": len(orders),
            "total_units": total_units,
            "total_revenue": total_revenue,
            "best_selling_product": products.get(best_product_id),
            "best_selling_category": best_category or "",
        }
        items = [
            {
                "product": products[product_id],
                "units_sold": units,
                "revenue": revenue_by_product[product_id],
            }
            for product_id, units in units_by_product.items()
        ]
        return data, items

    def generate_automatic_reports(
        self, weeks: Optional[int] = None
    ) -> List[WeeklySalesReport]:
        """Build the missing reports of the last *weeks* ISO weeks.

        The current week counts as the first one.  Returns only the
        reports generated by this call.
        """
        if weeks is None:
            weeks = settings.REPORTS_AUTOMATIC_WEEKS
        if weeks < 1:
            raise ReportGenerationError("weeks must be at least 1.")

        monday, _ = iso_week_bounds(timezone.localdate())
        generated = []
        for offset in range(weeks):
            start = monday - timedelta(weeks=offset)
            if self._repo.exists_period_key(period_key_for(start)):
                continue
            generated.append(
                self.generate_weekly_report(start, start + timedelta(days=6))
            )

        logger.info("report.automatic_completed", weeks=weeks, generated=len(generated))
        return generated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_report(self, report_id: str) -> WeeklySalesReport:
        """Raises ``ReportNotFound`` for unknown ids."""
        report = self._repo.get_by_id(report_id)
        if not report:
            raise ReportNotFound(f"Report {report_id} not found.")
        return report

    def list_reports_by_year(self, year: int) -> List[WeeklySalesReport]:
        return self._repo.list_by_year(year)

    def list_latest_reports(self, limit: int) -> List[WeeklySalesReport]:
        return self._repo.list_latest(limit)

    # ------------------------------------------------------------------
    # Daily profit
    # ------------------------------------------------------------------

    def generate_daily_profit_report(self, day: date) -> DailyProfitReportDTO:
        orders = self._repo.delivered_orders_between(day, day)

        lines = [
            DailyOrderDTO(
                order_number=order.order_number,
                total_amount=order.total_amount,
                units=sum(item.quantity for item in order.items.all()),
                created_at=order.created_at,
            )
            for order in orders
        ]
        report = DailyProfitReportDTO(
            date=day,
            total_profit=sum((line.total_amount for line in lines), Decimal("0.00")),
            total_orders=len(lines),
            total_units=sum(line.units for line in lines),
            orders=lines,
        )
        logger.info(
            "report.daily_profit_generated",
            date=day.isoformat(),
            total_orders=report.total_orders,
        )
        return report


class DashboardService:
    """Administrator overview of catalog, orders and users."""

    def __init__(self, repository: IReportRepository) -> None:
        self._repo = repository

    def get_dashboard(
        self,
        low_stock_threshold: Optional[int] = None,
        recent_limit: Optional[int] = None,
    ) -> DashboardDTO:
        if low_stock_threshold is None:
            low_stock_threshold = settings.DASHBOARD_LOW_STOCK_THRESHOLD
        if recent_limit is None:
            recent_limit = settings.DASHBOARD_RECENT_ORDERS

        stored = self._repo.count_orders_by_status()
        orders_by_status = {status: stored.get(status, 0) for status in OrderStatus}

        users_by_role = {role: 0 for role in Role}
        for role_id, total in self._repo.count_users_by_role_id().items():
            users_by_role[Role.from_code(role_id)] += total

        low_stock = self._repo.low_stock_products(
            low_stock_threshold, settings.DASHBOARD_LOW_STOCK_LIMIT
        )
        recent = self._repo.latest_orders(recent_limit)

        dashboard = DashboardDTO(
            total_products=self._repo.count_live_products(),
            total_orders=sum(orders_by_status.values()),
            total_users=sum(users_by_role.values()),
            orders_by_status={str(k): v for k, v in orders_by_status.items()},
            users_by_role={str(k): v for k, v in users_by_role.items()},
            low_stock_threshold=low_stock_threshold,
            low_stock_products=[
                LowStockProductDTO(
                    id=product.id,
                    sku=product.sku,
                    name=product.name,
                    stock=product.stock,
                )
                for product in low_stock
            ],
            recent_orders=[
                RecentOrderDTO(
                    id=order.id,
                    order_number=order.order_number,
                    username=order.user.username,
                    status=order.status,
                    total_amount=order.total_amount,
                    created_at=order.created_at,
                )
                for order in recent
            ],
        )
        logger.info(
            "report.dashboard_generated",
            total_orders=dashboard.total_orders,
            low_stock=len(dashboard.low_stock_products),
        )
        return dashboard
