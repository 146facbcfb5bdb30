"""Enumerations for domain models."""

from enum import Enum


class LedgerKind(str, Enum):
    """Kinds of ledger records."""

    PURCHASE = "PURCHASE"
    SALE = "SALE"

    @property
    def sign(self) -> int:
        """Direction in which this kind moves the stock counter."""
        return 1 if self is LedgerKind.PURCHASE else -1


class AggregateKey(str, Enum):
    """Names of cached read-side aggregates."""

    DASHBOARD = "dashboard"
    TOP_SELLERS = "top_sellers"
    LOW_STOCK = "low_stock"
