"""Cart repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.carts.models import Cart, CartItem


class ICartRepository(IRepository["Cart"]):
    """Repository contract for the Cart aggregate."""

    @abstractmethod
    def get_or_create_for_user(self, user) -> Cart:
        """Return the user's cart, creating an empty one on first access."""

    @abstractmethod
    def get_item(self, cart: Cart, product_id: str) -> Optional[CartItem]:
        """Retrieve the line for *product_id* (with product loaded)."""

    @abstractmethod
    def list_items(self, cart: Cart) -> List[CartItem]:
        """Return the cart lines ordered by product id."""

    @abstractmethod
    def save_item(self, item: CartItem) -> CartItem:
        """Persist a cart line."""

    @abstractmethod
    def delete_item(self, item: CartItem) -> None:
        """Remove a cart line."""

    @abstractmethod
    def clear(self, cart: Cart) -> int:
        """Delete every line; returns the number of lines removed."""
