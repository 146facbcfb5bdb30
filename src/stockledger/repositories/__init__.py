"""Repository layer - data access abstractions and implementations."""

from stockledger.repositories.protocols import (
    ProductRepository,
    LedgerRepository,
    CacheRepository,
)

__all__ = [
    "ProductRepository",
    "LedgerRepository",
    "CacheRepository",
]
