"""Integration tests for the sales report endpoints.

Covers:
- every report endpoint is admin-only.
- weekly generation is idempotent through the API.
- invalid ranges are rejected with 400.
- listing by year, latest reports and retrieval.
- daily profit report for a given day.
- dashboard counts, low-stock list and latest orders.
"""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from uuid import uuid4

import pytest
from freezegun import freeze_time

from modules.orders.constants import OrderStatus

pytestmark = pytest.mark.integration

URL = "/api/v1/reports/"
WEEK = {"start_date": "2025-01-13", "end_date": "2025-01-19"}


@pytest.fixture()
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture()
def delivered_week(customer, make_order, make_product):
    product = make_product(price="10.00")
    return make_order(
        customer,
        lines=[(product, 3)],
        status=OrderStatus.DELIVERED,
        created_at=datetime(2025, 1, 14, 17, tzinfo=dt_timezone.utc),
    )


class TestPermissions:
    @pytest.mark.parametrize("user_fixture", ["customer", "courier"])
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", f"{URL}?year=2025"),
            ("get", f"{URL}latest/"),
            ("get", f"{URL}daily-profit/"),
            ("get", f"{URL}dashboard/"),
            ("post", f"{URL}weekly/"),
            ("post", f"{URL}automatic/"),
        ],
    )
    def test_non_admins_forbidden(self, client_for, request, user_fixture, method, path):
        client = client_for(request.getfixturevalue(user_fixture))

        response = getattr(client, method)(path, format="json")

        assert response.status_code == 403

    def test_anonymous_unauthorized(self, api_client):
        assert api_client.get(f"{URL}latest/").status_code == 401


class TestWeeklyReport:
    def test_generates_report(self, admin_client, delivered_week):
        response = admin_client.post(f"{URL}weekly/", WEEK, format="json")

        assert response.status_code == 200
        assert response.data["period_key"] == "2025-W03"
        assert response.data["total_orders"] == 1
        assert response.data["total_units"] == 3
        assert response.data["total_revenue"] == "30.00"
        assert response.data["best_selling_category"] == "MEDICINE"
        assert len(response.data["items"]) == 1

    def test_idempotent(self, admin_client, delivered_week):
        first = admin_client.post(f"{URL}weekly/", WEEK, format="json")
        second = admin_client.post(f"{URL}weekly/", WEEK, format="json")

        assert first.data["id"] == second.data["id"]

    def test_start_after_end(self, admin_client):
        response = admin_client.post(
            f"{URL}weekly/",
            {"start_date": "2025-01-19", "end_date": "2025-01-13"},
            format="json",
        )

        assert response.status_code == 400

    def test_missing_dates(self, admin_client):
        assert admin_client.post(f"{URL}weekly/", {}, format="json").status_code == 400


class TestReportQueries:
    def test_list_by_year(self, admin_client):
        admin_client.post(f"{URL}weekly/", WEEK, format="json")

        response = admin_client.get(URL, {"year": 2025})

        assert response.status_code == 200
        assert [row["period_key"] for row in response.data] == ["2025-W03"]

    def test_list_requires_year(self, admin_client):
        assert admin_client.get(URL).status_code == 400

    def test_retrieve(self, admin_client):
        created = admin_client.post(f"{URL}weekly/", WEEK, format="json")

        response = admin_client.get(f"{URL}{created.data['id']}/")

        assert response.status_code == 200
        assert response.data["period_key"] == "2025-W03"

    def test_retrieve_unknown(self, admin_client):
        assert admin_client.get(f"{URL}{uuid4()}/").status_code == 404

    def test_latest(self, admin_client):
        for start, end in (
            ("2025-01-06", "2025-01-12"),
            ("2025-01-13", "2025-01-19"),
            ("2025-01-20", "2025-01-26"),
        ):
            admin_client.post(
                f"{URL}weekly/", {"start_date": start, "end_date": end}, format="json"
            )

        response = admin_client.get(f"{URL}latest/", {"limit": 2})

        assert [row["period_key"] for row in response.data] == [
            "2025-W04",
            "2025-W03",
        ]

    def test_latest_limit_bounds(self, admin_client):
        assert admin_client.get(f"{URL}latest/", {"limit": 0}).status_code == 400


class TestAutomaticReports:
    @freeze_time("2025-01-22 17:00:00")
    def test_generates_missing_weeks(self, admin_client):
        response = admin_client.post(f"{URL}automatic/", {"weeks": 2}, format="json")

        assert response.status_code == 200
        assert [row["period_key"] for row in response.data] == [
            "2025-W04",
            "2025-W03",
        ]

        again = admin_client.post(f"{URL}automatic/", {"weeks": 2}, format="json")
        assert again.data == []


class TestDailyProfit:
    def test_for_given_day(self, admin_client, delivered_week):
        response = admin_client.get(f"{URL}daily-profit/", {"date": "2025-01-14"})

        assert response.status_code == 200
        assert response.data["date"] == "2025-01-14"
        assert response.data["total_profit"] == "30.00"
        assert response.data["total_orders"] == 1
        assert response.data["orders"][0]["order_number"] == (
            delivered_week.order_number
        )

    @freeze_time("2025-01-15 17:00:00")
    def test_defaults_to_today(self, admin_client, delivered_week):
        response = admin_client.get(f"{URL}daily-profit/")

        assert response.data["date"] == "2025-01-15"
        assert response.data["total_orders"] == 0


class TestDashboard:
    def test_overview(self, admin_client, customer, make_order, make_product):
        scarce = make_product(name="Insulina", stock=2)
        plenty = make_product(name="Alcohol 70%", stock=300)
        make_order(customer, lines=[(plenty, 1)], status=OrderStatus.SHIPPED)

        response = admin_client.get(f"{URL}dashboard/")

        assert response.status_code == 200
        assert response.data["total_orders"] == 1
        assert response.data["total_products"] == 2
        assert response.data["total_users"] == 2
        assert response.data["orders_by_status"]["SHIPPED"] == 1
        assert response.data["orders_by_status"]["PENDING"] == 0
        assert response.data["users_by_role"] == {
            "ADMIN": 1,
            "CUSTOMER": 1,
            "COURIER": 0,
        }
        assert response.data["low_stock_threshold"] == 10
        assert [row["sku"] for row in response.data["low_stock_products"]] == [
            scarce.sku
        ]
        assert response.data["recent_orders"][0]["status"] == "SHIPPED"
        assert response.data["recent_orders"][0]["username"] == "cliente"

    def test_query_overrides(self, admin_client, customer, make_order, make_product):
        product = make_product(stock=50)
        for _ in range(3):
            make_order(customer, lines=[(product, 1)])

        response = admin_client.get(f"{URL}dashboard/", {"low_stock": 50, "recent": 1})

        assert response.data["low_stock_threshold"] == 50
        assert len(response.data["low_stock_products"]) == 1
        assert len(response.data["recent_orders"]) == 1

    @pytest.mark.parametrize("params", [{"low_stock": -1}, {"recent": 0}])
    def test_invalid_query(self, admin_client, params):
        assert admin_client.get(f"{URL}dashboard/", params).status_code == 400
