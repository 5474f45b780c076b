"""Order domain constants.

Defines the status vocabulary, the alias table for legacy tokens and the
transition table of the order state machine.  The table is only enforced
when ``settings.ORDERS_ENFORCE_TRANSITIONS`` is true.
"""

from __future__ import annotations

from django.db import models

from modules.orders.exceptions import InvalidStatus


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pendiente"
    PROCESSING = "PROCESSING", "En proceso"
    SHIPPED = "SHIPPED", "Enviado"
    DELIVERED = "DELIVERED", "Entregado"
    CANCELLED = "CANCELLED", "Cancelado"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

IN_PROCESS_STATES: set[str] = {OrderStatus.PROCESSING, OrderStatus.SHIPPED}

STATUS_ALIASES: dict[str, str] = {
    "EN_PROCESO": OrderStatus.PROCESSING,
}

ORDER_NUMBER_MAX_RETRIES = 5


def normalize_status(token: str | None) -> OrderStatus:
    """Resolve a client-supplied token to an ``OrderStatus``.

    Case-insensitive, surrounding whitespace ignored, aliases applied.

    Raises:
        InvalidStatus: the token names no known status.
    """
    if token is None:
        raise InvalidStatus(token)
    value = str(token).strip().upper()
    value = STATUS_ALIASES.get(value, value)
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(token) from None


def external_status(status: str) -> str:
    """Four-value vocabulary shown to legacy clients (SHIPPED reads as DELIVERED)."""
    if status == OrderStatus.SHIPPED:
        return OrderStatus.DELIVERED.value
    return str(status)
