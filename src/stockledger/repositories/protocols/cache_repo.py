"""Cache repository protocol for derived aggregates."""

from typing import Iterable, Protocol, Optional

from stockledger.domain.models import AggregateKey, CacheEntry


class CacheRepository(Protocol):
    """Interface for the aggregate cache store."""

    def get(self, key: AggregateKey) -> Optional[CacheEntry]:
        """Get the cached entry for an aggregate."""
        ...

    def upsert(self, entry: CacheEntry) -> CacheEntry:
        """Insert or replace the cached entry for an aggregate."""
        ...

    def evict(self, keys: Iterable[AggregateKey]) -> None:
        """Delete the cached entries for the given aggregates."""
        ...

    def get_generation(self) -> int:
        """Current cache generation."""
        ...

    def bump_generation(self) -> None:
        """Advance the cache generation, marking every older entry stale."""
        ...
