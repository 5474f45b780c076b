"""Persistence contract for orders.

An order is written together with its lines and its shipping snapshot,
and carries an append-only status history.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Persist ``user``, ``items``, ``shipping`` and optional ``notes``.

        Each item is a dict of ``product_id``, ``quantity`` and
        ``unit_price``; ``shipping`` holds ``ShippingAddress`` fields.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Row-locked fetch; call inside ``transaction.atomic``."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        changed_by=None,
    ) -> OrderStatusHistory: ...

    @abstractmethod
    def list_by_courier(self, courier_id: UUID) -> List[Order]: ...

    @abstractmethod
    def list_unassigned(self, status: str) -> List[Order]:
        """Oldest first."""

    @abstractmethod
    def count_by_status_for_courier(self, courier_id: UUID) -> Dict[str, int]: ...

    @abstractmethod
    def sum_delivered_for_courier_on(self, courier_id: UUID, day: date) -> Decimal:
        """Sum of DELIVERED totals for the courier created on local date *day*."""
