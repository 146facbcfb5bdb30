"""Pydantic schemas for purchase, sale and ledger endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from stockledger.domain.models.enums import LedgerKind


class PurchaseCreateRequest(BaseModel):
    """Request schema for registering a purchase."""

    product_id: Optional[str] = Field(default=None, description="Existing product ID")
    product_name: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Product name; the product is created if no product matches",
    )
    quantity: Decimal = Field(..., gt=0, decimal_places=4, description="Units received")
    unit_cost: Decimal = Field(..., ge=0, description="Cost per unit")
    supplier: Optional[str] = Field(default=None, max_length=100)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    invoice_number: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)
    occurred_at: Optional[datetime] = Field(default=None, description="Defaults to now")

    @model_validator(mode="after")
    def require_product_reference(self) -> "PurchaseCreateRequest":
        if not self.product_id and not (self.product_name and self.product_name.strip()):
            raise ValueError("product_id or product_name is required")
        return self


class SaleCreateRequest(BaseModel):
    """Request schema for registering a sale."""

    product_id: Optional[str] = Field(default=None, description="Product ID")
    product_name: Optional[str] = Field(default=None, max_length=100, description="Product name")
    quantity: Decimal = Field(..., gt=0, decimal_places=4, description="Units sold")
    unit_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Sale price per unit; defaults to the product's price",
    )
    unit_cost: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Cost basis per unit; defaults to the product's price",
    )
    customer: Optional[str] = Field(default=None, max_length=100)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)
    occurred_at: Optional[datetime] = Field(default=None, description="Defaults to now")

    @model_validator(mode="after")
    def require_product_reference(self) -> "SaleCreateRequest":
        if not self.product_id and not (self.product_name and self.product_name.strip()):
            raise ValueError("product_id or product_name is required")
        return self


class LedgerRecordUpdateRequest(BaseModel):
    """Request schema for amending a ledger record (partial update)."""

    product_id: Optional[str] = None
    quantity: Optional[Decimal] = Field(default=None, gt=0, decimal_places=4)
    unit_value: Optional[Decimal] = Field(default=None, ge=0)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0)
    counterparty: Optional[str] = Field(default=None, max_length=100)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    invoice_number: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)
    occurred_at: Optional[datetime] = None


class LedgerRecordResponse(BaseModel):
    """Response schema for a single ledger record."""

    model_config = {"from_attributes": True}

    record_id: str
    kind: LedgerKind
    product_id: str
    product_name: str
    quantity: Decimal
    unit_value: Decimal
    unit_cost: Optional[Decimal] = None
    total: Decimal
    profit: Optional[Decimal] = None
    counterparty: Optional[str] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    occurred_at: datetime
    is_reversed: bool
    reversed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LedgerRecordListResponse(BaseModel):
    """Response schema for listing ledger records."""

    records: list[LedgerRecordResponse]
    count: int
