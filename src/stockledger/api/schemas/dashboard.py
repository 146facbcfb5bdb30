"""Pydantic schemas for dashboard endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class TopSellerResponse(BaseModel):
    """A product ranked by quantity sold."""

    model_config = {"from_attributes": True}

    product_id: str
    product_name: str
    quantity_sold: Decimal
    times_sold: int
    revenue: Decimal


class LowStockResponse(BaseModel):
    """A product at or below the low-stock threshold."""

    model_config = {"from_attributes": True}

    product_id: str
    name: str
    category: str
    quantity: Decimal


class DashboardResponse(BaseModel):
    """Consolidated dashboard summary."""

    model_config = {"from_attributes": True}

    total_products: int
    products_in_stock: int
    products_low_stock: int
    inventory_value: Decimal
    sales_today: Decimal
    profit_today: Decimal
    sales_month: Decimal
    profit_month: Decimal
    purchases_month: Decimal
    generated_at: datetime
    top_sellers: list[TopSellerResponse]
