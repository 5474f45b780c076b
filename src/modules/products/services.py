"""Catalog use-cases.

Stock is deliberately absent from updates: only checkout (through
``InventoryService``) and explicit restocks move it, so the ledger is the
single writer of ``Product.stock``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_EDITABLE_FIELDS = ("name", "price", "description", "category", "is_active")


class ProductService:
    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def _require(self, product_id: str) -> Product:
        product = self._repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Raises ``ProductAlreadyExists`` if the SKU is taken, deleted rows too."""
        if self._repo.get_by_sku(dto.sku):
            logger.warning("product.duplicate_sku", sku=dto.sku)
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = self._repo.save(Product(**dto.model_dump()))
        logger.info("product.created", product_id=str(product.id), sku=product.sku)
        return product

    @transaction.atomic
    def update_product(self, product_id: str, dto: UpdateProductDTO) -> Product:
        """Apply the fields set on *dto*; raises ``ProductNotFound``."""
        product = self._require(product_id)
        changes = {
            field: value
            for field in _EDITABLE_FIELDS
            if (value := getattr(dto, field)) is not None
        }
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info(
            "product.updated", product_id=str(product.id), fields=sorted(changes)
        )
        return product

    @transaction.atomic
    def delete_product(self, product_id: str) -> None:
        if not self._repo.delete(product_id):
            raise ProductNotFound(f"Product {product_id} not found.")

    def get_product(self, product_id: str) -> Product:
        return self._require(product_id)

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return self._repo.list(filters)

    def search_products(
        self, name: str | None = None, category: str | None = None
    ) -> List[Product]:
        """Active products whose name contains *name*, optionally in *category*."""
        filters: Dict[str, Any] = {"is_active": True}
        if name:
            filters["name__icontains"] = name.strip()
        if category:
            filters["category"] = category.strip().upper()
        return self._repo.list(filters)
