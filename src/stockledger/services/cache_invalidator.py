"""Read-side cache invalidation."""

import logging
from typing import Iterable

from stockledger.domain.models import AggregateKey, LedgerKind
from stockledger.repositories.protocols import CacheRepository

logger = logging.getLogger(__name__)

# Aggregates whose inputs include each kind of state
QUANTITY_AGGREGATES = frozenset({AggregateKey.DASHBOARD, AggregateKey.LOW_STOCK})
SALE_AGGREGATES = frozenset({AggregateKey.DASHBOARD, AggregateKey.TOP_SELLERS})
PURCHASE_AGGREGATES = frozenset({AggregateKey.DASHBOARD})
CATALOG_AGGREGATES = frozenset(AggregateKey)


def aggregates_for_ledger(kind: LedgerKind) -> frozenset[AggregateKey]:
    """Aggregates made stale by a committed ledger write of the given kind."""
    if kind == LedgerKind.SALE:
        return QUANTITY_AGGREGATES | SALE_AGGREGATES
    return QUANTITY_AGGREGATES | PURCHASE_AGGREGATES


class CacheInvalidator:
    """
    Evicts cached aggregates inside the caller's transaction.

    Must run on the same session as the mutation it follows, immediately
    before commit: the eviction and the generation bump then become durable
    in the same commit as the mutation, and roll back with it.
    """

    def __init__(self, cache_repo: CacheRepository):
        self._cache_repo = cache_repo

    def invalidate(self, keys: Iterable[AggregateKey]) -> None:
        """Evict the given aggregates and advance the cache generation."""
        keys = sorted(set(keys), key=lambda k: k.value)
        if not keys:
            return
        self._cache_repo.evict(keys)
        self._cache_repo.bump_generation()
        logger.debug(f"Invalidated aggregates: {', '.join(k.value for k in keys)}")
