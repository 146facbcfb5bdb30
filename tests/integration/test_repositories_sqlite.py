"""
Integration tests for SQLAlchemy repositories with SQLite.

Tests cover:
- Conditional quantity increment (rows changed, floor at zero, unknown product)
- Case-insensitive unique product names
- Ledger queries and summaries
- Cache entries and generation counter
"""

from decimal import Decimal

import pytest

from stockledger.core.exceptions import DuplicateProductError
from stockledger.domain.models import (
    AggregateKey,
    CacheEntry,
    LedgerKind,
    LedgerRecord,
    Product,
)
from stockledger.repositories.sqlalchemy import (
    SqlAlchemyProductRepository,
    SqlAlchemyLedgerRepository,
    SqlAlchemyCacheRepository,
)

from tests.conftest import utc_datetime


def make_product(product_id: str = "prod-001", name: str = "Widget", quantity: str = "10") -> Product:
    return Product(
        product_id=product_id,
        name=name,
        category="Hardware",
        quantity=Decimal(quantity),
        unit_price=Decimal("5.00"),
        created_at=utc_datetime(2024, 1, 15),
    )


def make_record(
    record_id: str,
    kind: LedgerKind = LedgerKind.SALE,
    quantity: str = "2",
    unit_value: str = "5.00",
    day: int = 15,
    product_id: str = "prod-001",
) -> LedgerRecord:
    return LedgerRecord(
        record_id=record_id,
        kind=kind,
        product_id=product_id,
        product_name="Widget",
        quantity=Decimal(quantity),
        unit_value=Decimal(unit_value),
        total=Decimal(quantity) * Decimal(unit_value),
        profit=Decimal("1.00") if kind == LedgerKind.SALE else None,
        occurred_at=utc_datetime(2024, 6, day),
        created_at=utc_datetime(2024, 6, day),
    )


# =============================================================================
# PRODUCT REPOSITORY TESTS
# =============================================================================


class TestProductRepository:
    """Tests for SqlAlchemyProductRepository."""

    def test_increment_changes_one_row(self, product_repo: SqlAlchemyProductRepository):
        """
        GIVEN a product with quantity 10
        WHEN I increment it by -4
        THEN one row changes and the quantity is 6
        """
        product_repo.create(make_product())

        changed = product_repo.increment_quantity("prod-001", Decimal("-4"), utc_datetime(2024, 6, 1))

        assert changed == 1
        assert product_repo.get_quantity("prod-001") == Decimal("6")
        assert product_repo.get_by_id("prod-001").quantity == Decimal("6")

    def test_increment_below_zero_changes_nothing(self, product_repo: SqlAlchemyProductRepository):
        """
        GIVEN a product with quantity 10
        WHEN I increment it by -11
        THEN zero rows change and the quantity stays 10
        """
        product_repo.create(make_product())

        changed = product_repo.increment_quantity("prod-001", Decimal("-11"), utc_datetime(2024, 6, 1))

        assert changed == 0
        assert product_repo.get_quantity("prod-001") == Decimal("10")

    def test_increment_to_exactly_zero_allowed(self, product_repo: SqlAlchemyProductRepository):
        product_repo.create(make_product())

        assert product_repo.increment_quantity("prod-001", Decimal("-10"), utc_datetime(2024, 6, 1)) == 1
        assert product_repo.get_quantity("prod-001") == Decimal("0")

    def test_increment_drains_fractional_stock_exactly(self, product_repo: SqlAlchemyProductRepository):
        """
        GIVEN a product with quantity 0.3
        WHEN I increment it by -0.1 and then by -0.2
        THEN both updates change one row and the quantity is 0
        """
        product_repo.create(make_product(quantity="0.3"))

        assert product_repo.increment_quantity("prod-001", Decimal("-0.1"), utc_datetime(2024, 6, 1)) == 1
        assert product_repo.increment_quantity("prod-001", Decimal("-0.2"), utc_datetime(2024, 6, 1)) == 1
        assert product_repo.get_quantity("prod-001") == Decimal("0")

    def test_increment_unknown_product_changes_nothing(self, product_repo: SqlAlchemyProductRepository):
        assert product_repo.increment_quantity("missing", Decimal("1"), utc_datetime(2024, 6, 1)) == 0
        assert product_repo.get_quantity("missing") is None

    def test_name_unique_ignoring_case(self, product_repo: SqlAlchemyProductRepository):
        """
        GIVEN a product named "Widget"
        WHEN I insert another product named "wIDGET"
        THEN DuplicateProductError is raised by the unique index
        """
        product_repo.create(make_product())

        with pytest.raises(DuplicateProductError):
            product_repo.create(make_product(product_id="prod-002", name="wIDGET"))

    def test_get_by_name_ignores_case(self, product_repo: SqlAlchemyProductRepository):
        product_repo.create(make_product())

        assert product_repo.get_by_name(" WIDGET ").product_id == "prod-001"
        assert product_repo.get_by_name("Gadget") is None

    def test_counts_and_value(self, product_repo: SqlAlchemyProductRepository):
        product_repo.create(make_product())
        product_repo.create(make_product(product_id="prod-002", name="Empty", quantity="0"))
        product_repo.create(make_product(product_id="prod-003", name="Plenty", quantity="40"))

        assert product_repo.count_all() == 3
        assert product_repo.count_in_stock() == 2
        assert product_repo.count_low_stock(Decimal("10")) == 2
        assert product_repo.total_value() == Decimal("250.00")


# =============================================================================
# LEDGER REPOSITORY TESTS
# =============================================================================


class TestLedgerRepository:
    """Tests for SqlAlchemyLedgerRepository."""

    def test_query_filters_by_kind_and_range(self, ledger_repo: SqlAlchemyLedgerRepository):
        ledger_repo.create(make_record("s1", day=10))
        ledger_repo.create(make_record("s2", day=20))
        ledger_repo.create(make_record("p1", kind=LedgerKind.PURCHASE, day=12))

        sales = ledger_repo.query(kind=LedgerKind.SALE)
        in_range = ledger_repo.query(start=utc_datetime(2024, 6, 11), end=utc_datetime(2024, 6, 21))

        assert [r.record_id for r in sales] == ["s1", "s2"]
        assert [r.record_id for r in in_range] == ["p1", "s2"]

    def test_summarize_excludes_reversed(self, ledger_repo: SqlAlchemyLedgerRepository):
        """
        GIVEN two sales of 10.00 and one of them reversed
        WHEN summarizing sales for the month
        THEN only the active sale counts
        """
        ledger_repo.create(make_record("s1"))
        reversed_sale = make_record("s2")
        reversed_sale.is_reversed = True
        reversed_sale.reversed_at = utc_datetime(2024, 6, 16)
        ledger_repo.create(reversed_sale)

        total, profit = ledger_repo.summarize(
            LedgerKind.SALE,
            utc_datetime(2024, 6, 1, 0),
            utc_datetime(2024, 7, 1, 0),
        )

        assert total == Decimal("10.00")
        assert profit == Decimal("1.00")

    def test_count_by_product(self, ledger_repo: SqlAlchemyLedgerRepository):
        ledger_repo.create(make_record("s1"))
        ledger_repo.create(make_record("s2", product_id="prod-002"))

        assert ledger_repo.count_by_product("prod-001") == 1
        assert ledger_repo.count_by_product("prod-999") == 0

    def test_delete_removes_record(self, ledger_repo: SqlAlchemyLedgerRepository):
        ledger_repo.create(make_record("s1"))

        ledger_repo.delete("s1")

        assert ledger_repo.get_by_id("s1") is None


# =============================================================================
# CACHE REPOSITORY TESTS
# =============================================================================


class TestCacheRepository:
    """Tests for SqlAlchemyCacheRepository."""

    def test_generation_row_seeded_at_zero(self, cache_repo: SqlAlchemyCacheRepository):
        assert cache_repo.get_generation() == 0

    def test_bump_generation(self, cache_repo: SqlAlchemyCacheRepository):
        cache_repo.bump_generation()
        cache_repo.bump_generation()

        assert cache_repo.get_generation() == 2

    def test_upsert_get_and_evict(self, cache_repo: SqlAlchemyCacheRepository):
        """
        GIVEN a cached low-stock entry
        WHEN it is replaced and then evicted
        THEN get returns the replacement, then nothing
        """
        now = utc_datetime(2024, 6, 15)
        cache_repo.upsert(CacheEntry(AggregateKey.LOW_STOCK, "[]", 0, now))
        cache_repo.upsert(CacheEntry(AggregateKey.LOW_STOCK, "[1]", 3, now))

        entry = cache_repo.get(AggregateKey.LOW_STOCK)
        assert entry.payload == "[1]"
        assert entry.generation == 3

        cache_repo.evict([AggregateKey.LOW_STOCK, AggregateKey.DASHBOARD])
        assert cache_repo.get(AggregateKey.LOW_STOCK) is None
