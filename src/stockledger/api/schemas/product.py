"""Pydantic schemas for product endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ProductCreateRequest(BaseModel):
    """Request schema for creating a product."""

    name: str = Field(..., min_length=1, max_length=100, description="Unique product name")
    category: str = Field(..., min_length=1, max_length=50, description="Product category")
    quantity: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4, description="Opening stock")
    unit_price: Decimal = Field(default=Decimal("0"), ge=0, description="Unit sale price")


class ProductUpdateRequest(BaseModel):
    """Request schema for updating a product (partial update, never quantity)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)


class ProductResponse(BaseModel):
    """Response schema for a single product."""

    model_config = {"from_attributes": True}

    product_id: str
    name: str
    category: str
    quantity: Decimal
    unit_price: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductListResponse(BaseModel):
    """Response schema for listing products."""

    products: list[ProductResponse]
    count: int


class InventoryValueResponse(BaseModel):
    """Response schema for the total value of stock on hand."""

    inventory_value: Decimal
