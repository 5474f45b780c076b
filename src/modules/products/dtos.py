"""Product DTOs (Pydantic v2, immutable).

Views build these from request data; services never see raw payloads.
Stock is only settable on creation.  Afterwards it moves through
``RestockDTO`` or checkout.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.products.models import ProductCategory


class CreateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    description: str = ""
    stock: int = Field(default=0, ge=0)
    category: ProductCategory = ProductCategory.OTHER
    is_active: bool = True

    @field_validator("sku")
    @classmethod
    def upper_sku(cls, v: str) -> str:
        return v.upper()


class UpdateProductDTO(BaseModel):
    """Partial update: ``None`` means "leave unchanged"."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    description: str | None = None
    category: ProductCategory | None = None
    is_active: bool | None = None


class RestockDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int = Field(ge=1)
