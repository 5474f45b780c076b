"""ORM-backed order repository.

Reads eager-load the user, courier, shipping snapshot, lines and history,
since every API representation of an order needs them.  ``get_for_update``
locks only the order row; callers reload through ``get_by_id`` afterwards.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory, ShippingAddress
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _full():
    return Order.objects.select_related(
        "user", "courier", "shipping_address"
    ).prefetch_related("items__product", "status_history")


class OrderDjangoRepository(IOrderRepository):
    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Write the order, its lines and the shipping snapshot.

        Totals are the sum of the stored line subtotals; there are no
        delivery fees or discounts.
        """
        order = Order.objects.create(user=data["user"], notes=data.get("notes", ""))

        lines = [
            OrderItem(order=order, **line) for line in data.get("items", [])
        ]
        for line in lines:
            line.save()
        ShippingAddress.objects.create(order=order, **data["shipping"])

        order.subtotal = order.total_amount = sum(
            (line.subtotal for line in lines), Decimal("0.00")
        )
        order.save(update_fields=["subtotal", "total_amount"])

        logger.info(
            "order.persisted", order_id=str(order.id), line_count=len(lines)
        )
        return order

    def get_by_id(self, id: str) -> Optional[Order]:
        try:
            return _full().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return list(_full().filter(**(filters or {})))

    def list_by_courier(self, courier_id: UUID) -> List[Order]:
        return self.list({"courier_id": courier_id})

    def list_unassigned(self, status: str) -> List[Order]:
        return list(
            _full().filter(courier__isnull=True, status=status).order_by("created_at")
        )

    def count_by_status_for_courier(self, courier_id: UUID) -> Dict[str, int]:
        rows = (
            Order.objects.filter(courier_id=courier_id)
            .order_by()
            .values_list("status")
            .annotate(n=Count("id"))
        )
        return dict(rows)

    def sum_delivered_for_courier_on(self, courier_id: UUID, day: date) -> Decimal:
        total = Order.objects.filter(
            courier_id=courier_id,
            status=OrderStatus.DELIVERED,
            created_at__date=day,
        ).aggregate(total=Sum("total_amount"))["total"]
        return total if total is not None else Decimal("0.00")

    def save(self, entity: Order) -> Order:
        entity.save()
        logger.debug("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        changed_by=None,
    ) -> OrderStatusHistory:
        entry = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            changed_by=changed_by,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return entry
