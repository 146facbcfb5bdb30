"""Ledger record repository protocol."""

from datetime import datetime
from decimal import Decimal
from typing import Protocol, Optional

from stockledger.domain.models import LedgerRecord, LedgerKind
from stockledger.domain.views import TopSellerView


class LedgerRepository(Protocol):
    """Interface for purchase/sale ledger data access."""

    def create(self, record: LedgerRecord) -> LedgerRecord:
        """Persist a new ledger record."""
        ...

    def get_by_id(self, record_id: str) -> Optional[LedgerRecord]:
        """Retrieve ledger record by ID."""
        ...

    def update(self, record: LedgerRecord) -> LedgerRecord:
        """Update an existing ledger record."""
        ...

    def delete(self, record_id: str) -> None:
        """Delete a ledger record (hard delete)."""
        ...

    def query(
        self,
        kind: Optional[LedgerKind] = None,
        product_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_reversed: bool = False,
    ) -> list[LedgerRecord]:
        """Query ledger records with filters, ordered by occurred_at."""
        ...

    def count_by_product(self, product_id: str) -> int:
        """Count ledger records referencing a product (reversed included)."""
        ...

    def summarize(
        self,
        kind: LedgerKind,
        start: datetime,
        end: datetime,
    ) -> tuple[Decimal, Decimal]:
        """Return (sum of totals, sum of profit) of active records in [start, end)."""
        ...

    def top_sellers(self, limit: int) -> list[TopSellerView]:
        """Products ranked by quantity sold across active sales."""
        ...
