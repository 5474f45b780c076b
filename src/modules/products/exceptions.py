"""Product and inventory domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductAlreadyExists(Exception):
    """A product with the same SKU already exists."""


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class InactiveProduct(Exception):
    """The product is deactivated and cannot be added to a cart or sold."""


class InsufficientStock(Exception):
    """Requested quantity exceeds the stock available for a product.

    ``available`` is the stock observed when the request was rejected.
    """

    def __init__(self, product, available: int, requested: int) -> None:
        self.product = product
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product.name}: "
            f"requested {requested}, available {available}."
        )
