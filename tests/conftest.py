"""
Pytest configuration and fixtures for stock ledger tests.

This module provides:
- In-memory SQLite database fixtures (shared connection via StaticPool)
- File-backed SQLite fixtures for multi-threaded tests
- A controllable clock for deterministic timestamps and cache expiry
- Service, repository and factory fixtures
- FastAPI test client wired to the test database
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
import pytz
from sqlalchemy import StaticPool
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from stockledger.main import app
from stockledger.api.deps import get_session_maker
from stockledger.config.settings import Settings, set_settings, reset_settings
from stockledger.repositories.sqlalchemy.database import (
    Base,
    build_engine,
    build_session_factory,
    init_db,
    reset_database,
)
from stockledger.repositories.sqlalchemy import (
    SqlAlchemyProductRepository,
    SqlAlchemyLedgerRepository,
    SqlAlchemyCacheRepository,
)
from stockledger.services import (
    InventoryService,
    ProductService,
    DashboardService,
    ProductCreate,
    PurchaseCreate,
    SaleCreate,
)
from stockledger.domain.models import Product, LedgerRecord


# =============================================================================
# SETTINGS AND TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in UTC (the test store timezone)."""
    return pytz.UTC.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def test_settings() -> Settings:
    """Fast retries and a fixed store timezone for every test."""
    settings = Settings(
        database_url="sqlite://",
        timezone="UTC",
        adjust_max_attempts=3,
        adjust_backoff_ms=5,
        operation_timeout_seconds=10.0,
        sqlite_busy_timeout_seconds=10.0,
        aggregate_cache_ttl_seconds=30,
        low_stock_threshold=Decimal("10"),
        top_sellers_limit=5,
    )
    set_settings(settings)
    yield settings
    reset_database()
    reset_settings()


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    """Controllable clock starting at fixed_now."""
    return FakeClock(fixed_now)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """Session factory bound to the in-memory database."""
    return build_session_factory(test_engine)


@pytest.fixture(scope="function")
def test_session(session_factory) -> Session:
    """Create test database session."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def file_engine(tmp_path):
    """
    Engine on a SQLite file, one connection per thread.

    Use for tests where several threads run units of work at once.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'stockledger.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def file_session_factory(file_engine):
    """Session factory bound to the file-backed database."""
    return build_session_factory(file_engine)


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def product_repo(test_session) -> SqlAlchemyProductRepository:
    """Provide test ProductRepository."""
    return SqlAlchemyProductRepository(test_session)


@pytest.fixture
def ledger_repo(test_session) -> SqlAlchemyLedgerRepository:
    """Provide test LedgerRepository."""
    return SqlAlchemyLedgerRepository(test_session)


@pytest.fixture
def cache_repo(test_session) -> SqlAlchemyCacheRepository:
    """Provide test CacheRepository."""
    return SqlAlchemyCacheRepository(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def inventory_service(session_factory, clock, test_settings) -> InventoryService:
    """Provide test InventoryService."""
    return InventoryService(session_factory, clock=clock, settings=test_settings)


@pytest.fixture
def product_service(session_factory, clock, test_settings) -> ProductService:
    """Provide test ProductService."""
    return ProductService(session_factory, clock=clock, settings=test_settings)


@pytest.fixture
def dashboard_service(session_factory, clock, test_settings) -> DashboardService:
    """Provide test DashboardService."""
    return DashboardService(session_factory, clock=clock, settings=test_settings)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def product_factory(product_service) -> Callable[..., Product]:
    """Factory for creating test products."""
    counter = {"n": 0}

    def _create_product(
        name: Optional[str] = None,
        quantity: Decimal = Decimal("0"),
        unit_price: Decimal = Decimal("5.00"),
        category: str = "General",
    ) -> Product:
        if name is None:
            counter["n"] += 1
            name = f"Test Product {counter['n']}"
        return product_service.create_product(
            ProductCreate(
                name=name,
                category=category,
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    return _create_product


@pytest.fixture
def purchase_factory(inventory_service) -> Callable[..., LedgerRecord]:
    """Factory for registering test purchases."""

    def _register_purchase(
        product_name: Optional[str] = None,
        quantity: Decimal = Decimal("10"),
        unit_cost: Decimal = Decimal("2.00"),
        product_id: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> LedgerRecord:
        return inventory_service.register_purchase(
            PurchaseCreate(
                product_id=product_id,
                product_name=product_name,
                quantity=quantity,
                unit_cost=unit_cost,
                occurred_at=occurred_at,
            )
        )

    return _register_purchase


@pytest.fixture
def sale_factory(inventory_service) -> Callable[..., LedgerRecord]:
    """Factory for registering test sales."""

    def _register_sale(
        product_id: str,
        quantity: Decimal,
        unit_price: Optional[Decimal] = None,
        unit_cost: Optional[Decimal] = None,
        occurred_at: Optional[datetime] = None,
    ) -> LedgerRecord:
        return inventory_service.register_sale(
            SaleCreate(
                product_id=product_id,
                quantity=quantity,
                unit_price=unit_price,
                unit_cost=unit_cost,
                occurred_at=occurred_at,
            )
        )

    return _register_sale


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def widget(product_factory) -> Product:
    """Product "Widget" with 10 units at 5.00."""
    return product_factory(name="Widget", quantity=Decimal("10"), unit_price=Decimal("5.00"))


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(session_factory) -> TestClient:
    """Provide FastAPI test client with test database."""
    app.dependency_overrides[get_session_maker] = lambda: session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def current_quantity(session_factory, product_id: str) -> Decimal:
    """Read a product's committed quantity through a fresh session."""
    session = session_factory()
    try:
        return SqlAlchemyProductRepository(session).get_quantity(product_id)
    finally:
        session.close()


def current_generation(session_factory) -> int:
    """Read the committed cache generation through a fresh session."""
    session = session_factory()
    try:
        return SqlAlchemyCacheRepository(session).get_generation()
    finally:
        session.close()
