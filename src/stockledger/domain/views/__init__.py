"""View models for service outputs."""

from stockledger.domain.views.dashboard import (
    DashboardView,
    TopSellerView,
    LowStockView,
    to_payload,
    dashboard_from_payload,
    top_sellers_from_payload,
    low_stock_from_payload,
)

__all__ = [
    "DashboardView",
    "TopSellerView",
    "LowStockView",
    "to_payload",
    "dashboard_from_payload",
    "top_sellers_from_payload",
    "low_stock_from_payload",
]
