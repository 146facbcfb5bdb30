"""API request/response schemas."""

from stockledger.api.schemas.product import (
    ProductCreateRequest,
    ProductUpdateRequest,
    ProductResponse,
    ProductListResponse,
    InventoryValueResponse,
)
from stockledger.api.schemas.ledger import (
    PurchaseCreateRequest,
    SaleCreateRequest,
    LedgerRecordUpdateRequest,
    LedgerRecordResponse,
    LedgerRecordListResponse,
)
from stockledger.api.schemas.dashboard import (
    DashboardResponse,
    TopSellerResponse,
    LowStockResponse,
)

__all__ = [
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "ProductResponse",
    "ProductListResponse",
    "InventoryValueResponse",
    "PurchaseCreateRequest",
    "SaleCreateRequest",
    "LedgerRecordUpdateRequest",
    "LedgerRecordResponse",
    "LedgerRecordListResponse",
    "DashboardResponse",
    "TopSellerResponse",
    "LowStockResponse",
]
