"""Report DTOs (Pydantic v2, immutable).

``DailyProfitReportDTO`` and ``DashboardDTO`` are computed on demand and
never persisted.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class DailyOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_number: str
    total_amount: Decimal
    units: int
    created_at: datetime.datetime


class DailyProfitReportDTO(BaseModel):
    """Revenue of the DELIVERED orders created on ``date``."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    total_profit: Decimal
    total_orders: int
    total_units: int
    orders: List[DailyOrderDTO]


class LowStockProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    sku: str
    name: str
    stock: int


class RecentOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    order_number: str
    username: str
    status: str
    total_amount: Decimal
    created_at: datetime.datetime


class DashboardDTO(BaseModel):
    """Administrator overview computed on every request.

    ``orders_by_status`` and ``users_by_role`` list every status and role,
    zero counts included.
    """

    model_config = ConfigDict(frozen=True)

    total_products: int
    total_orders: int
    total_users: int
    orders_by_status: Dict[str, int]
    users_by_role: Dict[str, int]
    low_stock_threshold: int
    low_stock_products: List[LowStockProductDTO]
    recent_orders: List[RecentOrderDTO]
