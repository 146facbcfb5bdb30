"""LedgerRecord domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from stockledger.domain.models.enums import LedgerKind


@dataclass
class LedgerRecord:
    """
    Purchase or sale event (source of truth for stock movements).

    - PURCHASE: unit_value is the unit cost paid to the supplier
    - SALE: unit_value is the unit price charged; unit_cost is the cost basis
      used for profit
    - total and profit are computed when the record is written and only
      change when the record is explicitly updated
    """

    record_id: str
    kind: LedgerKind
    product_id: str
    product_name: str
    quantity: Decimal
    unit_value: Decimal
    total: Decimal
    occurred_at: datetime
    unit_cost: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    counterparty: Optional[str] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    is_reversed: bool = False
    reversed_at: Optional[datetime] = field(default=None)
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = LedgerKind(self.kind)

    @property
    def stock_delta(self) -> Decimal:
        """Signed change this record applied to the product's quantity."""
        return self.quantity * self.kind.sign

    @property
    def is_sale(self) -> bool:
        return self.kind == LedgerKind.SALE


def compute_total(unit_value: Decimal, quantity: Decimal) -> Decimal:
    """Line total of a ledger record."""
    return unit_value * quantity


def compute_profit(unit_price: Decimal, unit_cost: Decimal, quantity: Decimal) -> Decimal:
    """Profit of a sale: (sale price - cost price) x quantity."""
    return (unit_price - unit_cost) * quantity
