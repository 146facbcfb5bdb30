"""Repository protocol definitions (interfaces)."""

from stockledger.repositories.protocols.product_repo import ProductRepository
from stockledger.repositories.protocols.ledger_repo import LedgerRepository
from stockledger.repositories.protocols.cache_repo import CacheRepository

__all__ = [
    "ProductRepository",
    "LedgerRepository",
    "CacheRepository",
]
