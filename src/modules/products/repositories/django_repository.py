"""ORM-backed product repository.

Look-ups only see live rows (``deleted_at`` unset) except ``get_by_sku``,
which must also find withdrawn products so their SKU is never reused.
Stock moves are single ``UPDATE`` statements with ``F()`` expressions; the
decrement carries a ``stock >= quantity`` guard in its WHERE clause.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _first(queryset) -> Optional[Product]:
    try:
        return queryset.first()
    except (ValueError, ValidationError):
        return None


def _shift_stock(queryset, delta) -> bool:
    return queryset.update(stock=F("stock") + delta, updated_at=timezone.now()) == 1


class ProductDjangoRepository(IProductRepository):
    def get_by_id(self, id: str) -> Optional[Product]:
        return _first(Product.objects.alive().filter(id=id))

    def get_for_update(self, id: str) -> Optional[Product]:
        return _first(Product.objects.alive().select_for_update().filter(id=id))

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return Product.objects.filter(sku=sku.strip().upper()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return list(Product.objects.alive().filter(**(filters or {})))

    def save(self, entity: Product) -> Product:
        entity.save()
        logger.debug("product.saved", product_id=str(entity.id), sku=entity.sku)
        return entity

    def delete(self, id: str) -> bool:
        product = self.get_by_id(id)
        if product is None:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(product.id))
        return True

    def decrement_stock(self, id: str, quantity: int) -> bool:
        return _shift_stock(
            Product.objects.filter(id=id, stock__gte=quantity), -quantity
        )

    def increment_stock(self, id: str, quantity: int) -> bool:
        return _shift_stock(Product.objects.filter(id=id), quantity)
