"""Populate a development database with a pharmacy catalog and order history.

Idempotent for users and products; orders are only generated on an empty
orders table so repeated runs do not skew the sales reports.
"""

from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

import structlog
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import Role
from modules.accounts.models import User
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.models import Product, ProductCategory

logger = structlog.get_logger(__name__)

DISTRICTS = ("Miraflores", "San Isidro", "Surco", "San Borja", "Lince", "Barranco")

CATALOG = (
    ("MED-001", "Paracetamol 500mg x 100", ProductCategory.MEDICINE, "12.50"),
    ("MED-002", "Ibuprofeno 400mg x 50", ProductCategory.MEDICINE, "18.90"),
    ("MED-003", "Amoxicilina 500mg x 21", ProductCategory.MEDICINE, "25.00"),
    ("MED-004", "Loratadina 10mg x 30", ProductCategory.MEDICINE, "9.80"),
    ("MED-005", "Omeprazol 20mg x 28", ProductCategory.MEDICINE, "14.30"),
    ("COS-001", "Protector solar FPS 50", ProductCategory.COSMETIC, "59.90"),
    ("COS-002", "Crema hidratante 200ml", ProductCategory.COSMETIC, "34.50"),
    ("HIG-001", "Jabón antibacterial", ProductCategory.HYGIENE, "4.20"),
    ("HIG-002", "Pasta dental 75ml", ProductCategory.HYGIENE, "7.90"),
    ("HIG-003", "Alcohol en gel 500ml", ProductCategory.HYGIENE, "11.00"),
    ("SUP-001", "Vitamina C 1g x 30", ProductCategory.SUPPLEMENT, "22.40"),
    ("SUP-002", "Omega 3 x 60", ProductCategory.SUPPLEMENT, "45.00"),
    ("OTR-001", "Termómetro digital", ProductCategory.OTHER, "29.90"),
    ("OTR-002", "Mascarillas KN95 x 10", ProductCategory.OTHER, "15.00"),
)

STATUS_WEIGHTS = {
    OrderStatus.DELIVERED: 40,
    OrderStatus.PENDING: 20,
    OrderStatus.PROCESSING: 15,
    OrderStatus.SHIPPED: 15,
    OrderStatus.CANCELLED: 10,
}


def _ensure_user(username: str, password: str, role: Role, **extra) -> User:
    user = User.objects.filter(username=username).first()
    if user is None:
        user = User(username=username, **extra)
        user.assign_role(role)
        user.set_password(password)
        user.save()
    return user


class Command(BaseCommand):
    help = "Seed the database with users, products and a month of orders."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=40)
        parser.add_argument("--days", type=int, default=30)
        parser.add_argument("--seed", type=int, default=42)

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options["seed"])

        _ensure_user("admin", "admin123", Role.ADMIN, is_staff=True, is_superuser=True)
        couriers = [
            _ensure_user(
                f"repartidor{n}", "courier123", Role.COURIER, phone=f"98765432{n}"
            )
            for n in (1, 2)
        ]
        customers = [
            _ensure_user(name, "cliente123", Role.CUSTOMER, email=f"{name}@example.com")
            for name in ("lucia", "mateo", "valeria", "diego")
        ]
        products = [
            Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "category": category,
                    "price": Decimal(price),
                    "stock": rng.randint(20, 200),
                },
            )[0]
            for sku, name, category, price in CATALOG
        ]

        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Orders already present, skipping."))
            created = 0
        else:
            created = self._seed_orders(
                rng, customers, couriers, products, options["orders"], options["days"]
            )

        logger.info(
            "seed.completed",
            customers=len(customers),
            couriers=len(couriers),
            products=len(products),
            orders=created,
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(customers)} customers, {len(couriers)} couriers, "
                f"{len(products)} products and {created} orders."
            )
        )

    def _seed_orders(self, rng, customers, couriers, products, count, days) -> int:
        repository = OrderDjangoRepository()
        statuses = list(STATUS_WEIGHTS)
        weights = list(STATUS_WEIGHTS.values())

        for i in range(count):
            status = rng.choices(statuses, weights=weights)[0]
            order = repository.create(
                {
                    "user": rng.choice(customers),
                    "notes": f"Seed order {i + 1}",
                    "items": [
                        {
                            "product_id": product.id,
                            "quantity": rng.randint(1, 3),
                            "unit_price": product.price,
                        }
                        for product in rng.sample(products, k=rng.randint(1, 4))
                    ],
                    "shipping": {
                        "address_line": f"Av. Larco {100 + i}",
                        "district": rng.choice(DISTRICTS),
                    },
                }
            )
            repository.add_history(order.id, status, notes="Seed data")
            Order.objects.filter(id=order.id).update(
                status=status,
                courier=None if status == OrderStatus.PENDING else rng.choice(couriers),
                created_at=timezone.now() - timedelta(days=rng.randint(0, days)),
            )
        return count
