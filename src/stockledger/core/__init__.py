"""Core utilities and shared functionality."""

from stockledger.core.timezone import (
    get_store_tz,
    now_local,
    to_local,
    to_naive_local,
    start_of_day,
    start_of_month,
)
from stockledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    DuplicateProductError,
    InventoryErrorKind,
    InventoryError,
    InsufficientStockError,
    ContentionExhaustedError,
    OperationTimeoutError,
    OperationCancelledError,
)
from stockledger.core.scope import OperationScope

__all__ = [
    "get_store_tz",
    "now_local",
    "to_local",
    "to_naive_local",
    "start_of_day",
    "start_of_month",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "DuplicateProductError",
    "InventoryErrorKind",
    "InventoryError",
    "InsufficientStockError",
    "ContentionExhaustedError",
    "OperationTimeoutError",
    "OperationCancelledError",
    "OperationScope",
]
