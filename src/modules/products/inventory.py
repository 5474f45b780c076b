"""Inventory ledger.

The single authority over ``Product.stock``.  Every decrement is a
conditional update (``stock >= quantity``) issued after the product row
has been locked, so two concurrent checkouts can never both take the
last unit and stock never goes negative.

Methods decorated with ``transaction.atomic`` join the caller's
transaction when one is open (checkout), so a failure anywhere in the
caller rolls back the decrements already applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class InventoryService:
    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def has_enough_stock(self, product_id: str, quantity: int) -> bool:
        """Advisory check; the answer may be stale by the time it is used.

        Raises:
            ProductNotFound: the product does not exist.
        """
        product = self._repo.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product.stock >= quantity

    @transaction.atomic
    def check_and_decrement_stock(self, product_id: str, quantity: int) -> Product:
        """Atomically take *quantity* units of a product.

        Returns the product with its post-decrement stock.

        Raises:
            ProductNotFound: the product does not exist.
            InsufficientStock: fewer than *quantity* units remain.
            ValueError: quantity is lower than 1.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")

        log = logger.bind(product_id=str(product_id), quantity=quantity)

        product = self._repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")

        if not self._repo.decrement_stock(str(product.id), quantity):
            product.refresh_from_db(fields=["stock"])
            log.warning("inventory.insufficient_stock", available=product.stock)
            raise InsufficientStock(product, product.stock, quantity)

        product.refresh_from_db(fields=["stock", "updated_at"])
        log.info("inventory.stock_decremented", remaining=product.stock)
        return product

    @transaction.atomic
    def restock(self, product_id: str, quantity: int) -> Product:
        """Replenish a product.

        Raises:
            ProductNotFound: the product does not exist.
            ValueError: quantity is lower than 1.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")

        product = self._repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")

        self._repo.increment_stock(str(product.id), quantity)
        product.refresh_from_db(fields=["stock", "updated_at"])
        logger.info(
            "inventory.restocked",
            product_id=str(product.id),
            quantity=quantity,
            stock=product.stock,
        )
        return product
