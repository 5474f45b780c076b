"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``ShippingDataDTO``: delivery address supplied at checkout.
- ``DeliveryStatsDTO``: per-courier dashboard counters, derived on read.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ShippingDataDTO(BaseModel):
    """Immutable DTO for the checkout shipping address."""

    model_config = ConfigDict(frozen=True)

    address_line: str = ""
    district: str = ""
    city: str = "Lima"
    reference: str = ""
    notes: str = ""

    @field_validator("address_line", "district", "reference")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("city")
    @classmethod
    def city_defaults_to_lima(cls, v: str) -> str:
        return v.strip() or "Lima"


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class DeliveryStatsDTO(BaseModel):
    """Immutable DTO for a courier's delivery dashboard.

    ``in_process`` counts PROCESSING and SHIPPED orders.
    ``todays_earnings`` sums the totals of DELIVERED orders created today
    (local date).
    """

    model_config = ConfigDict(frozen=True)

    pending: int
    in_process: int
    delivered: int
    todays_earnings: Decimal
