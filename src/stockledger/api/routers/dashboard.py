"""Dashboard endpoints."""

from fastapi import APIRouter, Depends

from stockledger.api.deps import get_dashboard_service
from stockledger.api.schemas import DashboardResponse, TopSellerResponse, LowStockResponse
from stockledger.services import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    """Consolidated stock, sales and purchases summary."""
    return DashboardResponse.model_validate(service.get_dashboard())


@router.get("/top-sellers", response_model=list[TopSellerResponse])
def get_top_sellers(
    service: DashboardService = Depends(get_dashboard_service),
) -> list[TopSellerResponse]:
    """Best-selling products by quantity."""
    return [TopSellerResponse.model_validate(item) for item in service.get_top_sellers()]


@router.get("/low-stock", response_model=list[LowStockResponse])
def get_low_stock(
    service: DashboardService = Depends(get_dashboard_service),
) -> list[LowStockResponse]:
    """Products at or below the low-stock threshold."""
    return [LowStockResponse.model_validate(item) for item in service.get_low_stock()]
