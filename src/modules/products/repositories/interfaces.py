"""Persistence contract for the catalog and its stock counters."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft delete; ``False`` when there is no live product with *id*."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Match on the normalised SKU, withdrawn products included."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Row-locked fetch; call inside ``transaction.atomic``."""

    @abstractmethod
    def decrement_stock(self, id: str, quantity: int) -> bool:
        """Take *quantity* units, or change nothing and return ``False``."""

    @abstractmethod
    def increment_stock(self, id: str, quantity: int) -> bool: ...
