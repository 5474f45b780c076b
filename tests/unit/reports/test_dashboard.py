"""Unit tests for DashboardService.

Covers:
- every order status and role is reported, zeros included.
- users with unknown role codes count as customers.
- low stock honours the threshold and skips inactive or deleted products.
- latest orders, newest first, capped by the limit.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest

from modules.orders.constants import OrderStatus
from modules.reports.repositories.django_repository import ReportDjangoRepository
from modules.reports.services import DashboardService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return DashboardService(repository=ReportDjangoRepository())


@pytest.fixture()
def well_stocked(make_product):
    return make_product(name="Alcohol 70%", stock=500)


class TestCounts:
    def test_empty_store(self, service):
        dashboard = service.get_dashboard()

        assert dashboard.total_orders == 0
        assert dashboard.total_products == 0
        assert dashboard.total_users == 0
        assert dashboard.orders_by_status == {
            "PENDING": 0,
            "PROCESSING": 0,
            "SHIPPED": 0,
            "DELIVERED": 0,
            "CANCELLED": 0,
        }
        assert dashboard.users_by_role == {"ADMIN": 0, "CUSTOMER": 0, "COURIER": 0}
        assert dashboard.low_stock_products == []
        assert dashboard.recent_orders == []

    def test_orders_per_status(self, service, customer, make_order, well_stocked):
        make_order(customer, lines=[(well_stocked, 1)])
        make_order(customer, lines=[(well_stocked, 1)])
        make_order(customer, lines=[(well_stocked, 1)], status=OrderStatus.DELIVERED)

        dashboard = service.get_dashboard()

        assert dashboard.total_orders == 3
        assert dashboard.orders_by_status["PENDING"] == 2
        assert dashboard.orders_by_status["DELIVERED"] == 1
        assert dashboard.orders_by_status["CANCELLED"] == 0

    def test_users_per_role(self, service, admin_user, customer, courier, make_user):
        legacy = make_user("legado", "CUSTOMER")
        legacy.role_id = 99
        legacy.save()

        dashboard = service.get_dashboard()

        assert dashboard.total_users == 4
        assert dashboard.users_by_role == {"ADMIN": 1, "CUSTOMER": 2, "COURIER": 1}

    def test_deleted_products_not_counted(self, service, make_product):
        make_product()
        make_product().delete()

        assert service.get_dashboard().total_products == 1


class TestLowStock:
    def test_threshold_is_inclusive(self, service, make_product):
        make_product(name="Ibuprofeno", stock=3)
        make_product(name="Aspirina", stock=10)
        make_product(name="Loratadina", stock=11)

        dashboard = service.get_dashboard(low_stock_threshold=10)

        assert dashboard.low_stock_threshold == 10
        assert [p.name for p in dashboard.low_stock_products] == [
            "Ibuprofeno",
            "Aspirina",
        ]

    def test_default_threshold_from_settings(self, service, settings, make_product):
        settings.DASHBOARD_LOW_STOCK_THRESHOLD = 2
        make_product(name="Ibuprofeno", stock=2)
        make_product(name="Aspirina", stock=3)

        dashboard = service.get_dashboard()

        assert dashboard.low_stock_threshold == 2
        assert [p.name for p in dashboard.low_stock_products] == ["Ibuprofeno"]

    def test_skips_inactive_and_deleted(self, service, make_product):
        make_product(name="Retirado", stock=0, is_active=False)
        make_product(name="Borrado", stock=0).delete()
        make_product(name="Agotado", stock=0)

        dashboard = service.get_dashboard()

        assert [p.name for p in dashboard.low_stock_products] == ["Agotado"]

    def test_capped_by_limit(self, service, settings, make_product):
        settings.DASHBOARD_LOW_STOCK_LIMIT = 2
        for stock in (4, 1, 0):
            make_product(stock=stock)

        dashboard = service.get_dashboard()

        assert [p.stock for p in dashboard.low_stock_products] == [0, 1]


class TestRecentOrders:
    def test_newest_first(self, service, customer, make_order, well_stocked):
        base = datetime(2025, 3, 1, 15, tzinfo=dt_timezone.utc)
        orders = [
            make_order(
                customer,
                lines=[(well_stocked, 1)],
                created_at=base + timedelta(hours=hour),
            )
            for hour in range(3)
        ]

        dashboard = service.get_dashboard(recent_limit=2)

        assert [o.order_number for o in dashboard.recent_orders] == [
            orders[2].order_number,
            orders[1].order_number,
        ]
        assert dashboard.recent_orders[0].username == "cliente"
        assert dashboard.recent_orders[0].status == "PENDING"
