"""Cache models for derived read-side aggregates."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from stockledger.domain.models.enums import AggregateKey


@dataclass
class CacheEntry:
    """
    Precomputed aggregate keyed by name.

    IMPORTANT: Never edit directly; always recompute from products and ledger.
    `generation` is the cache generation the value was computed at; an entry
    whose generation is behind the current one is stale.
    """

    key: AggregateKey
    payload: str
    generation: int
    computed_at: datetime
    expires_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.key, str):
            self.key = AggregateKey(self.key)

    def is_fresh(self, generation: int, now: datetime) -> bool:
        if self.generation != generation:
            return False
        return self.expires_at is None or now < self.expires_at
