"""API routers package."""

from stockledger.api.routers.products import router as products_router
from stockledger.api.routers.ledger import (
    router as ledger_router,
    purchases_router,
    sales_router,
)
from stockledger.api.routers.dashboard import router as dashboard_router

__all__ = [
    "products_router",
    "purchases_router",
    "sales_router",
    "ledger_router",
    "dashboard_router",
]
