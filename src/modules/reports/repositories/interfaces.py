"""Report repository interface.

Besides storing reports, the repository is the read side over delivered
orders that the aggregations scan and over the catalog, order and user
tables the admin dashboard summarises.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.products.models import Product
    from modules.reports.models import WeeklySalesReport


class IReportRepository(IRepository["WeeklySalesReport"]):
    """Repository contract for weekly sales reports."""

    @abstractmethod
    def get_by_period_key(self, period_key: str) -> Optional[WeeklySalesReport]:
        """Retrieve the stored report of an ISO week."""

    @abstractmethod
    def exists_period_key(self, period_key: str) -> bool:
        """``True`` if a report for the ISO week is already stored."""

    @abstractmethod
    def create_with_items(
        self, data: Dict[str, Any], items: List[Dict[str, Any]]
    ) -> WeeklySalesReport:
        """Insert a report and its per-product rows in one transaction.

        Raises ``IntegrityError`` when the period key is already taken.
        """

    @abstractmethod
    def list_by_year(self, year: int) -> List[WeeklySalesReport]:
        """Reports whose ISO week belongs to *year*, newest first."""

    @abstractmethod
    def list_latest(self, limit: int) -> List[WeeklySalesReport]:
        """The *limit* most recent reports by week start."""

    @abstractmethod
    def delivered_orders_between(self, start: date, end: date) -> List[Order]:
        """DELIVERED orders created in ``[start, end]`` (local dates), items loaded."""

    # Dashboard read side

    @abstractmethod
    def count_orders_by_status(self) -> Dict[str, int]:
        """Order count per stored status; absent statuses are omitted."""

    @abstractmethod
    def count_users_by_role_id(self) -> Dict[int, int]:
        """User count per raw role code."""

    @abstractmethod
    def count_live_products(self) -> int:
        """Products not soft-deleted, active or not."""

    @abstractmethod
    def low_stock_products(self, threshold: int, limit: int) -> List[Product]:
        """Active live products with ``stock <= threshold``, lowest stock first."""

    @abstractmethod
    def latest_orders(self, limit: int) -> List[Order]:
        """The *limit* newest orders, owner loaded."""
