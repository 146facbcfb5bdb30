"""Service layer - business logic orchestration."""

from stockledger.services.inventory_service import (
    InventoryService,
    PurchaseCreate,
    SaleCreate,
    LedgerRecordUpdate,
)
from stockledger.services.product_service import ProductService, ProductCreate, ProductUpdate
from stockledger.services.dashboard_service import DashboardService
from stockledger.services.stock_adjuster import StockAdjuster, backoff_delay
from stockledger.services.unit_of_work import SqlAlchemyUnitOfWork, UnitState
from stockledger.services.cache_invalidator import CacheInvalidator, aggregates_for_ledger

__all__ = [
    "InventoryService",
    "PurchaseCreate",
    "SaleCreate",
    "LedgerRecordUpdate",
    "ProductService",
    "ProductCreate",
    "ProductUpdate",
    "DashboardService",
    "StockAdjuster",
    "backoff_delay",
    "SqlAlchemyUnitOfWork",
    "UnitState",
    "CacheInvalidator",
    "aggregates_for_ledger",
]
