"""Cart domain exceptions.

Product-level failures (``ProductNotFound``, ``InactiveProduct``,
``InsufficientStock``) are raised from ``modules.products.exceptions``.
"""

from __future__ import annotations


class CartItemNotFound(Exception):
    """The cart holds no line for the referenced product."""
