"""Order use cases: checkout, status changes and delivery.

Checkout is all-or-nothing.  Stock is taken line by line through the
inventory ledger (lines sorted by product id so two checkouts lock rows in
the same order), the order is written with a frozen copy of each price and
of the shipping address, and the cart is emptied last.  Any exception rolls
the whole unit back, cart included.

Status tokens arrive in several spellings and are normalised before use.
Transitions are free unless ``ORDERS_ENFORCE_TRANSITIONS`` is on.  A
cancelled order keeps its stock decremented.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import Role
from modules.accounts.exceptions import InvalidRole
from modules.orders.constants import OrderStatus, normalize_status
from modules.orders.dtos import DeliveryStatsDTO
from modules.orders.exceptions import (
    EmptyCart,
    InvalidStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.products.exceptions import InactiveProduct
from modules.products.inventory import InventoryService

if TYPE_CHECKING:
    from modules.carts.repositories.interfaces import ICartRepository
    from modules.orders.dtos import ShippingDataDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._orders = order_repository
        self._carts = cart_repository
        self._inventory = InventoryService(repository=product_repository)

    def _locked(self, order_id: UUID | str) -> Order:
        order = self._orders.get_for_update(str(order_id))
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _reload(self, order: Order) -> Order:
        return self._orders.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order_from_cart(self, user, shipping: ShippingDataDTO) -> Order:
        """Turn *user*'s cart into a PENDING order.

        Raises:
            EmptyCart: nothing to check out.
            ProductNotFound: a cart line points at a withdrawn product.
            InactiveProduct: a product was taken off sale.
            InsufficientStock: a line asks for more than is on hand.
        """
        log = logger.bind(user_id=str(user.id))
        log.info("order.checkout_started")

        cart = self._carts.get_or_create_for_user(user)
        lines = self._carts.list_items(cart)
        if not lines:
            log.warning("order.empty_cart")
            raise EmptyCart("Cart is empty.")

        priced_lines = []
        for line in lines:
            if not line.product.is_sellable:
                raise InactiveProduct(f"Product {line.product.sku} is not available.")
            product = self._inventory.check_and_decrement_stock(
                line.product_id, line.quantity
            )
            priced_lines.append(
                {
                    "product_id": product.id,
                    "quantity": line.quantity,
                    "unit_price": product.price,
                }
            )

        order = self._orders.create(
            {
                "user": user,
                "items": priced_lines,
                "notes": shipping.notes,
                "shipping": shipping.model_dump(exclude={"notes"}),
            }
        )
        self._orders.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
            changed_by=user,
        )
        self._carts.clear(cart)

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=str(order.total_amount),
        )
        return self._reload(order)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID | str,
        token: str,
        changed_by=None,
        notes: str = "",
    ) -> Order:
        """Set the status named by *token* (admin path).

        Raises:
            InvalidStatus: unknown token or, when enforced, a forbidden move.
            OrderNotFound: no such order.
        """
        target = normalize_status(token)
        return self._move(self._locked(order_id), target, token, changed_by, notes)

    @transaction.atomic
    def update_delivery_status(
        self, order_id: UUID | str, courier, token: str, notes: str = ""
    ) -> Order:
        """Same as ``update_status`` but restricted to the assigned courier."""
        target = normalize_status(token)
        order = self._locked(order_id)
        if order.courier_id != courier.id:
            logger.warning(
                "order.delivery_access_denied",
                order_id=str(order.id),
                courier_id=str(courier.id),
            )
            raise OrderAccessDenied(
                f"Order {order.order_number} is not assigned to {courier.username}."
            )
        return self._move(order, target, token, courier, notes)

    def _move(
        self, order: Order, target: OrderStatus, token: str, changed_by, notes: str
    ) -> Order:
        previous = order.status
        log = logger.bind(
            order_id=str(order.id), old_status=previous, new_status=target.value
        )

        if settings.ORDERS_ENFORCE_TRANSITIONS and not order.can_transition_to(target):
            log.warning("order.invalid_transition")
            raise InvalidStatus(
                token, f"Cannot transition from {previous} to {target.value}."
            )

        order.status = target
        self._orders.save(order)
        self._orders.add_history(
            order_id=order.id,
            status=target,
            old_status=previous,
            notes=notes,
            changed_by=changed_by,
        )
        log.info("order.status_changed")
        return self._reload(order)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    @transaction.atomic
    def assign_courier(self, order_id: UUID | str, courier, assigned_by=None) -> Order:
        """Attach *courier* to the order; reassigning is allowed.

        Raises:
            InvalidRole: *courier* is not a courier.
            OrderNotFound: no such order.
        """
        if courier.role != Role.COURIER:
            logger.warning(
                "order.assign_invalid_role",
                user_id=str(courier.id),
                role=str(courier.role),
            )
            raise InvalidRole(courier, Role.COURIER)

        order = self._locked(order_id)
        order.courier = courier
        self._orders.save(order)
        self._orders.add_history(
            order_id=order.id,
            status=order.status,
            old_status=order.status,
            notes=f"Assigned to courier {courier.username}",
            changed_by=assigned_by,
        )

        logger.info(
            "order.courier_assigned",
            order_id=str(order.id),
            courier_id=str(courier.id),
        )
        return self._reload(order)

    def get_orders_by_courier(self, courier) -> List[Order]:
        return self._orders.list_by_courier(courier.id)

    def get_unassigned_orders(self, status: str = OrderStatus.PENDING) -> List[Order]:
        """Courier-less orders in *status*, oldest first."""
        return self._orders.list_unassigned(normalize_status(status))

    def get_delivery_stats(self, courier) -> DeliveryStatsDTO:
        counts = self._orders.count_by_status_for_courier(courier.id)
        return DeliveryStatsDTO(
            pending=counts.get(OrderStatus.PENDING, 0),
            in_process=counts.get(OrderStatus.PROCESSING, 0)
            + counts.get(OrderStatus.SHIPPED, 0),
            delivered=counts.get(OrderStatus.DELIVERED, 0),
            todays_earnings=self._orders.sum_delivered_for_courier_on(
                courier.id, timezone.localdate()
            ),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str) -> Order:
        order = self._orders.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_order_for_user(self, order_id: UUID | str, user) -> Order:
        """Owner, assigned courier and admins may read an order.

        Raises:
            OrderNotFound: no such order.
            OrderAccessDenied: anyone else.
        """
        order = self.get_order(order_id)
        if user.is_admin or user.id in (order.user_id, order.courier_id):
            return order
        raise OrderAccessDenied(f"Order {order_id} is not accessible.")
