"""Dependency injection for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from stockledger.repositories.sqlalchemy import get_session_factory
from stockledger.services import InventoryService, ProductService, DashboardService


def get_session_maker() -> sessionmaker:
    """Provide the session factory units of work open sessions from."""
    return get_session_factory()


def get_inventory_service(
    session_factory: sessionmaker = Depends(get_session_maker),
) -> InventoryService:
    """Provide InventoryService instance."""
    return InventoryService(session_factory)


def get_product_service(
    session_factory: sessionmaker = Depends(get_session_maker),
) -> ProductService:
    """Provide ProductService instance."""
    return ProductService(session_factory)


def get_dashboard_service(
    session_factory: sessionmaker = Depends(get_session_maker),
) -> DashboardService:
    """Provide DashboardService instance."""
    return DashboardService(session_factory)
