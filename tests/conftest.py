from decimal import Decimal
from itertools import count

import pytest
from rest_framework.test import APIClient

from modules.accounts.constants import Role
from modules.accounts.models import User
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.models import Product, ProductCategory

_sku_counter = count(1)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def _create_user(username: str, role: Role, **extra) -> User:
    user = User(username=username, **extra)
    user.assign_role(role)
    user.set_password("testpass123")
    user.save()
    return user


@pytest.fixture()
def make_user():
    return _create_user


@pytest.fixture()
def admin_user():
    return _create_user("admin", Role.ADMIN)


@pytest.fixture()
def customer():
    return _create_user("cliente", Role.CUSTOMER)


@pytest.fixture()
def other_customer():
    return _create_user("otro_cliente", Role.CUSTOMER)


@pytest.fixture()
def courier():
    return _create_user("repartidor", Role.COURIER)


@pytest.fixture()
def other_courier():
    return _create_user("repartidor2", Role.COURIER)


@pytest.fixture()
def client_for():
    """Build an APIClient force-authenticated as the given user."""

    def _client(user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_product():
    def _make(
        name: str = "Paracetamol 500mg",
        price: str = "10.00",
        stock: int = 10,
        category: str = ProductCategory.MEDICINE,
        is_active: bool = True,
        sku: str | None = None,
    ) -> Product:
        return Product.objects.create(
            sku=sku or f"TEST-{next(_sku_counter):04d}",
            name=name,
            price=Decimal(price),
            stock=stock,
            category=category,
            is_active=is_active,
        )

    return _make


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_order(make_product):
    """Persist an order directly, bypassing cart and stock.

    ``lines`` is a list of ``(product, quantity)``; ``created_at`` overrides
    the auto timestamp (reports group orders by creation date).
    """

    def _make(
        user: User,
        lines=None,
        status: str = OrderStatus.PENDING,
        courier: User | None = None,
        created_at=None,
    ) -> Order:
        if lines is None:
            lines = [(make_product(), 1)]
        order = OrderDjangoRepository().create(
            {
                "user": user,
                "items": [
                    {
                        "product_id": product.id,
                        "quantity": quantity,
                        "unit_price": product.price,
                    }
                    for product, quantity in lines
                ],
                "shipping": {"address_line": "Jr. Junín 120", "district": "Lima"},
            }
        )
        updates = {"status": status, "courier": courier}
        if created_at is not None:
            updates["created_at"] = created_at
        Order.objects.filter(id=order.id).update(**updates)
        order.refresh_from_db()
        return order

    return _make
