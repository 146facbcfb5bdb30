"""Dashboard service: cached read-side aggregates."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from stockledger.config.settings import Settings, get_settings
from stockledger.core.exceptions import ContentionExhaustedError
from stockledger.core.scope import OperationScope
from stockledger.core.timezone import now_local, start_of_day, start_of_month
from stockledger.domain.models import AggregateKey, CacheEntry, LedgerKind
from stockledger.domain.views import (
    DashboardView,
    LowStockView,
    TopSellerView,
    dashboard_from_payload,
    low_stock_from_payload,
    to_payload,
    top_sellers_from_payload,
)
from stockledger.services.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DashboardService:
    """
    Computes summary aggregates and caches them in the store.

    A cached value is served only while its generation matches the current
    cache generation and its TTL has not run out. Every mutation bumps the
    generation in its own commit, so no value computed before a commit is
    served after it.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = now_local,
        settings: Optional[Settings] = None,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._settings = settings or get_settings()

    def get_dashboard(self) -> DashboardView:
        """Consolidated summary of stock, sales and purchases."""
        return self._cached(AggregateKey.DASHBOARD, self._compute_dashboard, dashboard_from_payload)

    def get_top_sellers(self) -> list[TopSellerView]:
        """Best-selling products by quantity sold."""
        return self._cached(
            AggregateKey.TOP_SELLERS,
            lambda uow, now: uow.ledger.top_sellers(self._settings.top_sellers_limit),
            top_sellers_from_payload,
        )

    def get_low_stock(self) -> list[LowStockView]:
        """Products at or below the low-stock threshold."""
        return self._cached(AggregateKey.LOW_STOCK, self._compute_low_stock, low_stock_from_payload)

    def _cached(
        self,
        key: AggregateKey,
        compute: Callable[[SqlAlchemyUnitOfWork, datetime], T],
        decode: Callable[[str], T],
    ) -> T:
        """
        Serve a fresh cache entry or recompute and store the aggregate.

        The generation is read before and after computing; if a mutation
        committed in between, the value may mix old and new state and is
        recomputed instead of being cached or returned.
        """
        attempts = self._settings.adjust_max_attempts
        ttl = timedelta(seconds=self._settings.aggregate_cache_ttl_seconds)

        for attempt in range(1, attempts + 1):
            with self._unit() as uow:
                generation = uow.cache.get_generation()
                now = self._clock()

                entry = uow.cache.get(key)
                if entry and entry.is_fresh(generation, now):
                    return decode(entry.payload)

                value = compute(uow, now)
                if uow.cache.get_generation() == generation:
                    self._store(uow, CacheEntry(key, to_payload(value), generation, now, now + ttl))
                    return value

            logger.warning(
                f"Aggregate {key.value} changed while being computed (attempt {attempt}/{attempts})"
            )

        logger.error(f"Gave up computing aggregate {key.value} after {attempts} attempts")
        raise ContentionExhaustedError(None, None, attempts)

    @staticmethod
    def _store(uow: SqlAlchemyUnitOfWork, entry: CacheEntry) -> None:
        try:
            uow.cache.upsert(entry)
            uow.commit()
        except IntegrityError:
            # Another reader cached the same generation first
            logger.debug(f"Aggregate {entry.key.value} already cached at generation {entry.generation}")

    def _compute_dashboard(self, uow: SqlAlchemyUnitOfWork, now: datetime) -> DashboardView:
        threshold = self._settings.low_stock_threshold
        today = start_of_day(now)
        tomorrow = start_of_day(today + timedelta(days=1, hours=12))
        month = start_of_month(now)

        sales_today, profit_today = uow.ledger.summarize(LedgerKind.SALE, today, tomorrow)
        sales_month, profit_month = uow.ledger.summarize(LedgerKind.SALE, month, tomorrow)
        purchases_month, _ = uow.ledger.summarize(LedgerKind.PURCHASE, month, tomorrow)

        return DashboardView(
            total_products=uow.products.count_all(),
            products_in_stock=uow.products.count_in_stock(),
            products_low_stock=uow.products.count_low_stock(threshold),
            inventory_value=uow.products.total_value(),
            sales_today=sales_today,
            profit_today=profit_today,
            sales_month=sales_month,
            profit_month=profit_month,
            purchases_month=purchases_month,
            generated_at=now,
            top_sellers=uow.ledger.top_sellers(self._settings.top_sellers_limit),
        )

    def _compute_low_stock(self, uow: SqlAlchemyUnitOfWork, now: datetime) -> list[LowStockView]:
        return [
            LowStockView(
                product_id=p.product_id,
                name=p.name,
                category=p.category,
                quantity=p.quantity,
            )
            for p in uow.products.list_low_stock(self._settings.low_stock_threshold)
        ]

    def _unit(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(
            self._session_factory,
            OperationScope(timeout_seconds=self._settings.operation_timeout_seconds),
        )
