"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stockledger.config.settings import get_settings
from stockledger.config.logging_config import setup_logging
from stockledger.repositories.sqlalchemy.database import init_db
from stockledger.api.routers import (
    products_router,
    purchases_router,
    sales_router,
    ledger_router,
    dashboard_router,
)
from stockledger.core.exceptions import AppError, InventoryErrorKind

# 499: client closed request (nginx convention), used for caller cancellation
STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "DUPLICATE_PRODUCT": 409,
    InventoryErrorKind.INSUFFICIENT_STOCK.value: 409,
    InventoryErrorKind.CONTENTION_EXHAUSTED.value: 503,
    InventoryErrorKind.TIMEOUT.value: 504,
    InventoryErrorKind.CANCELLED.value: 499,
}
RETRY_AFTER_SECONDS = "1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    yield
    # Shutdown (nothing to clean up)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Stock ledger: purchases, sales and on-hand inventory",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(products_router)
app.include_router(purchases_router)
app.include_router(sales_router)
app.include_router(ledger_router)
app.include_router(dashboard_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = STATUS_BY_CODE.get(exc.code, 400)
    content = {"error": exc.code, "message": exc.message}
    if getattr(exc, "product_id", None):
        content["product_id"] = exc.product_id

    headers = None
    if exc.code == InventoryErrorKind.CONTENTION_EXHAUSTED.value:
        headers = {"Retry-After": RETRY_AFTER_SECONDS}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
