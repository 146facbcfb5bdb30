"""Domain layer - pure business models with no external dependencies."""

from stockledger.domain.models import (
    Product,
    LedgerRecord,
    CacheEntry,
    LedgerKind,
    AggregateKey,
)

__all__ = [
    "Product",
    "LedgerRecord",
    "CacheEntry",
    "LedgerKind",
    "AggregateKey",
]
