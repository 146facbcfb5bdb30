"""Domain models package."""

from stockledger.domain.models.enums import LedgerKind, AggregateKey
from stockledger.domain.models.product import Product
from stockledger.domain.models.ledger import LedgerRecord, compute_total, compute_profit
from stockledger.domain.models.cache import CacheEntry

__all__ = [
    "LedgerKind",
    "AggregateKey",
    "Product",
    "LedgerRecord",
    "compute_total",
    "compute_profit",
    "CacheEntry",
]
