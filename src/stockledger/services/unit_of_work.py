"""Transaction boundary for stock and ledger mutations."""

import logging
import math
from enum import Enum
from typing import Iterable, Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from stockledger.config.settings import get_settings
from stockledger.core.exceptions import AppError, OperationTimeoutError
from stockledger.core.scope import OperationScope
from stockledger.domain.models import AggregateKey
from stockledger.repositories.sqlalchemy import (
    SqlAlchemyProductRepository,
    SqlAlchemyLedgerRepository,
    SqlAlchemyCacheRepository,
)
from stockledger.services.cache_invalidator import CacheInvalidator

logger = logging.getLogger(__name__)


class UnitState(str, Enum):
    """Lifecycle of a unit of work."""

    OPEN = "OPEN"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"


class SqlAlchemyUnitOfWork:
    """
    One database transaction spanning product, ledger and cache writes.

    Usage:
        with SqlAlchemyUnitOfWork(session_factory, scope) as uow:
            ...
            uow.invalidate(keys)
            uow.commit()

    Leaving the block without commit() - normally or through an exception -
    rolls everything back, so a failure after the stock adjustment also
    undoes the adjustment. Aggregates registered with invalidate() are
    evicted inside the transaction right before it commits.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        scope: Optional[OperationScope] = None,
    ):
        self._session_factory = session_factory
        self.scope = scope or OperationScope()
        self.state: Optional[UnitState] = None
        self._session: Optional[Session] = None
        self._pending_invalidations: set[AggregateKey] = set()

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.scope.check()
        self._session = self._session_factory()
        self.products = SqlAlchemyProductRepository(self._session)
        self.ledger = SqlAlchemyLedgerRepository(self._session)
        self.cache = SqlAlchemyCacheRepository(self._session)
        self._invalidator = CacheInvalidator(self.cache)
        self._pending_invalidations = set()
        self.state = UnitState.OPEN
        try:
            self._apply_store_timeout()
        except Exception:
            self._session.close()
            self.state = UnitState.ROLLED_BACK
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self.state == UnitState.OPEN:
                self.rollback()
                if exc is not None:
                    self._log_rollback(exc)
        finally:
            self._session.close()

        if isinstance(exc, OperationalError) and self.scope.expired:
            raise OperationTimeoutError(
                f"Operation deadline exceeded waiting for the store: {exc.orig}"
            ) from exc
        return False

    def invalidate(self, keys: Iterable[AggregateKey]) -> None:
        """Register aggregates to evict when this unit commits."""
        self._pending_invalidations.update(keys)

    def commit(self) -> None:
        """Evict registered aggregates and commit the transaction."""
        self.scope.check()
        if self._pending_invalidations:
            self._invalidator.invalidate(self._pending_invalidations)
        self._session.commit()
        self.state = UnitState.COMMITTED

    def rollback(self) -> None:
        """Discard every write made in this unit."""
        self._session.rollback()
        self.state = UnitState.ROLLED_BACK

    def _apply_store_timeout(self) -> None:
        """Cap SQLite's lock wait at the time left before the deadline."""
        if self._session.get_bind().dialect.name != "sqlite":
            return
        remaining = self.scope.remaining()
        if remaining is None:
            remaining = get_settings().sqlite_busy_timeout_seconds
        busy_timeout_ms = max(1, math.ceil(remaining * 1000))
        self._session.execute(text(f"PRAGMA busy_timeout = {busy_timeout_ms}"))

    @staticmethod
    def _log_rollback(exc: BaseException) -> None:
        if isinstance(exc, AppError):
            logger.error(f"Rolled back unit of work: {exc.code}: {exc.message}")
        else:
            logger.error(f"Rolled back unit of work after unexpected error: {exc!r}")
