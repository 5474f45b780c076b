"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class EmptyCart(Exception):
    """Checkout was attempted with no items in the cart."""


class InvalidStatus(Exception):
    """Unknown status token, or a transition the state machine rejects."""

    def __init__(self, token, message: str | None = None) -> None:
        self.token = token
        super().__init__(message or f"Invalid order status: {token!r}.")


class OrderAccessDenied(Exception):
    """The caller is neither the owner, the assigned courier nor an admin."""
