"""SQLAlchemy implementation of CacheRepository."""

from typing import Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from stockledger.core.timezone import to_local, to_naive_local
from stockledger.domain.models import AggregateKey, CacheEntry
from stockledger.repositories.sqlalchemy.orm_models import CacheEntryORM, CacheGenerationORM

_generation = CacheGenerationORM.__table__
GENERATION_ROW_ID = 1


class SqlAlchemyCacheRepository:
    """SQLAlchemy-backed cache repository for derived aggregates."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: AggregateKey) -> Optional[CacheEntry]:
        """Get the cached entry for an aggregate."""
        orm_entry = self._db.get(CacheEntryORM, key.value, populate_existing=True)
        return self._to_domain(orm_entry) if orm_entry else None

    def upsert(self, entry: CacheEntry) -> CacheEntry:
        """Insert or update a cache entry."""
        orm_entry = self._db.get(CacheEntryORM, entry.key.value)

        if orm_entry is None:
            orm_entry = CacheEntryORM(key=entry.key.value)
            self._db.add(orm_entry)

        orm_entry.payload = entry.payload
        orm_entry.generation = entry.generation
        orm_entry.computed_at = to_naive_local(entry.computed_at)
        orm_entry.expires_at = to_naive_local(entry.expires_at) if entry.expires_at else None

        self._db.flush()
        return self._to_domain(orm_entry)

    def evict(self, keys: Iterable[AggregateKey]) -> None:
        """Delete cached entries for the given aggregates."""
        names = [key.value for key in keys]
        if not names:
            return
        self._db.query(CacheEntryORM).filter(
            CacheEntryORM.key.in_(names)
        ).delete(synchronize_session="fetch")
        self._db.flush()

    def get_generation(self) -> int:
        """Current cache generation."""
        generation = self._db.execute(
            select(_generation.c.generation).where(_generation.c.id == GENERATION_ROW_ID)
        ).scalar_one_or_none()
        return generation or 0

    def bump_generation(self) -> None:
        """Advance the cache generation."""
        self._db.execute(
            update(_generation)
            .where(_generation.c.id == GENERATION_ROW_ID)
            .values(generation=_generation.c.generation + 1)
        )

    @staticmethod
    def _to_domain(orm: CacheEntryORM) -> CacheEntry:
        """Convert ORM cache entry to domain model."""
        return CacheEntry(
            key=AggregateKey(orm.key),
            payload=orm.payload,
            generation=orm.generation,
            computed_at=to_local(orm.computed_at),
            expires_at=to_local(orm.expires_at) if orm.expires_at else None,
        )
