"""Integration tests for page-number pagination on listing endpoints.

Covers:
- default page size of 20 and the ``page_size`` query parameter.
- the hard cap of 100 rows per page.
- order listings paginate the caller's own orders.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product, ProductCategory

pytestmark = pytest.mark.integration

CATALOG_SIZE = 120


@pytest.fixture()
def large_catalog():
    Product.objects.bulk_create(
        Product(
            sku=f"BULK-{n:03d}",
            name=f"Ibuprofeno lote {n:03d}",
            price=Decimal("4.50"),
            stock=n,
            category=ProductCategory.MEDICINE,
        )
        for n in range(CATALOG_SIZE)
    )


class TestCatalogPages:
    def test_first_page_uses_default_size(self, api_client, large_catalog):
        body = api_client.get("/api/v1/products/").data

        assert body["count"] == CATALOG_SIZE
        assert len(body["results"]) == 20
        assert body["previous"] is None
        assert body["next"]

    @pytest.mark.parametrize(("requested", "served"), [(50, 50), (1000, 100)])
    def test_page_size_parameter_is_capped(
        self, api_client, large_catalog, requested, served
    ):
        body = api_client.get(f"/api/v1/products/?page_size={requested}").data

        assert len(body["results"]) == served
        assert body["next"]


class TestOrderPages:
    def test_second_page_holds_the_remainder(
        self, client_for, customer, make_order, make_product
    ):
        product = make_product()
        for _ in range(25):
            make_order(customer, lines=[(product, 1)])

        body = client_for(customer).get("/api/v1/orders/?page=2").data

        assert body["count"] == 25
        assert len(body["results"]) == 5
        assert body["next"] is None
