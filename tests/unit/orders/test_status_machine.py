"""Unit tests for the order status state machine.

Covers:
- token normalisation (case, whitespace, ``EN_PROCESO`` alias).
- permissive transitions by default, history on every change.
- enforced transitions behind ``ORDERS_ENFORCE_TRANSITIONS``.
- external four-value vocabulary.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.orders.constants import OrderStatus, external_status, normalize_status
from modules.orders.exceptions import InvalidStatus, OrderNotFound
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        cart_repository=CartDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


# ===========================================================================
# normalize_status
# ===========================================================================


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("PENDING", OrderStatus.PENDING),
            ("pending", OrderStatus.PENDING),
            (" shipped ", OrderStatus.SHIPPED),
            ("Delivered", OrderStatus.DELIVERED),
            ("en_proceso", OrderStatus.PROCESSING),
            ("EN_PROCESO", OrderStatus.PROCESSING),
            ("processing", OrderStatus.PROCESSING),
            ("cancelled", OrderStatus.CANCELLED),
        ],
    )
    def test_resolves_tokens(self, token, expected):
        assert normalize_status(token) == expected

    @pytest.mark.parametrize("token", ["", "LOST", "en proceso", None])
    def test_unknown_token(self, token):
        with pytest.raises(InvalidStatus):
            normalize_status(token)


class TestExternalStatus:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (OrderStatus.PENDING, "PENDING"),
            (OrderStatus.PROCESSING, "PROCESSING"),
            (OrderStatus.SHIPPED, "DELIVERED"),
            (OrderStatus.DELIVERED, "DELIVERED"),
            (OrderStatus.CANCELLED, "CANCELLED"),
        ],
    )
    def test_mapping(self, status, expected):
        assert external_status(status) == expected


# ===========================================================================
# update_status
# ===========================================================================


class TestUpdateStatus:
    def test_changes_status_and_records_history(
        self, service, customer, admin_user, make_order
    ):
        order = make_order(customer)

        updated = service.update_status(
            order.id, "en_proceso", changed_by=admin_user, notes="Preparando"
        )

        assert updated.status == OrderStatus.PROCESSING
        entry = OrderStatusHistory.objects.get(
            order=order, new_status=OrderStatus.PROCESSING
        )
        assert entry.old_status == OrderStatus.PENDING
        assert entry.changed_by == admin_user
        assert entry.notes == "Preparando"

    def test_permissive_by_default(self, service, customer, make_order):
        order = make_order(customer, status=OrderStatus.DELIVERED)

        updated = service.update_status(order.id, "pending")

        assert updated.status == OrderStatus.PENDING

    def test_unknown_token_changes_nothing(self, service, customer, make_order):
        order = make_order(customer)

        with pytest.raises(InvalidStatus):
            service.update_status(order.id, "LOST")

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert not OrderStatusHistory.objects.filter(order=order).exists()

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.update_status(uuid4(), "shipped")

    def test_cancel_does_not_restore_stock(
        self, service, customer, make_order, make_product
    ):
        product = make_product(stock=4)
        order = make_order(customer, lines=[(product, 2)])

        service.update_status(order.id, "cancelled")

        product.refresh_from_db()
        assert product.stock == 4


class TestEnforcedTransitions:
    @pytest.fixture(autouse=True)
    def _enforce(self, settings):
        settings.ORDERS_ENFORCE_TRANSITIONS = True

    def test_valid_forward_chain(self, service, customer, make_order):
        order = make_order(customer)

        for token in ("processing", "shipped", "delivered"):
            order = service.update_status(order.id, token)

        assert order.status == OrderStatus.DELIVERED

    def test_skipping_a_step_is_rejected(self, service, customer, make_order):
        order = make_order(customer)

        with pytest.raises(InvalidStatus):
            service.update_status(order.id, "delivered")

        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_states_are_final(self, service, customer, make_order, terminal):
        order = make_order(customer, status=terminal)

        with pytest.raises(InvalidStatus):
            service.update_status(order.id, "processing")

    def test_cancel_from_shipped(self, service, customer, make_order):
        order = make_order(customer, status=OrderStatus.SHIPPED)

        assert service.update_status(order.id, "cancelled").status == (
            OrderStatus.CANCELLED
        )


class TestOrderModel:
    def test_display_status(self, customer, make_order):
        order = make_order(customer, status=OrderStatus.SHIPPED)
        assert order.display_status == "DELIVERED"

    def test_is_terminal(self, customer, make_order):
        assert make_order(customer, status=OrderStatus.CANCELLED).is_terminal
        assert not make_order(customer).is_terminal
