"""Product repository protocol."""

from datetime import datetime
from decimal import Decimal
from typing import Protocol, Optional

from stockledger.domain.models import Product


class ProductRepository(Protocol):
    """Interface for product (catalogue and stock counter) data access."""

    def create(self, product: Product) -> Product:
        """Persist a new product. Raises DuplicateProductError on a name collision."""
        ...

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Retrieve product by ID, re-reading it from the store."""
        ...

    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve product by name, case-insensitively."""
        ...

    def list_all(self) -> list[Product]:
        """List all products ordered by name."""
        ...

    def search(self, text: str) -> list[Product]:
        """List products whose name contains text, case-insensitively."""
        ...

    def list_in_stock(self) -> list[Product]:
        """List products with quantity > 0."""
        ...

    def list_low_stock(self, threshold: Decimal) -> list[Product]:
        """List products with quantity <= threshold, lowest first."""
        ...

    def update(self, product: Product) -> Product:
        """Update name, category and unit price. Never touches quantity."""
        ...

    def delete(self, product_id: str) -> None:
        """Delete a product (hard delete)."""
        ...

    def increment_quantity(
        self,
        product_id: str,
        delta: Decimal,
        updated_at: datetime,
    ) -> int:
        """
        Apply quantity = quantity + delta in one conditional statement.

        The statement only matches when the product exists and the result is
        non-negative. Returns the number of rows changed (0 or 1).
        """
        ...

    def get_quantity(self, product_id: str) -> Optional[Decimal]:
        """Re-read the current quantity, or None if the product is gone."""
        ...

    def count_all(self) -> int:
        ...

    def count_in_stock(self) -> int:
        ...

    def count_low_stock(self, threshold: Decimal) -> int:
        ...

    def total_value(self) -> Decimal:
        """Sum of quantity x unit_price across the catalogue."""
        ...
