"""Product domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Product:
    """
    Catalogue product with its on-hand quantity.

    `quantity` is the stock counter: it only moves through the conditional
    adjustment in the product repository and is never negative once committed.
    """

    product_id: str
    name: str
    category: str
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    unit_price: Decimal = field(default_factory=lambda: Decimal("0"))
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0

    @property
    def stock_value(self) -> Decimal:
        """Value of the units on hand at the current unit price."""
        return self.quantity * self.unit_price

    def has_stock_for(self, requested: Decimal) -> bool:
        return self.quantity >= requested
