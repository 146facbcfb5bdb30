"""Application-level exceptions."""

from decimal import Decimal
from enum import Enum
from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class DuplicateProductError(AppError):
    """Raised when a product name collides case-insensitively with another product."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Product with name '{name}' already exists", code="DUPLICATE_PRODUCT")


class InventoryErrorKind(str, Enum):
    """Failure kinds of the stock mutation path."""

    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    CONTENTION_EXHAUSTED = "CONTENTION_EXHAUSTED"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"


class InventoryError(AppError):
    """
    Raised when a stock adjustment cannot be completed.

    Carries the product and the signed delta that was being applied so the
    caller can tell which mutation failed. The unit of work that observed it
    has always been rolled back by the time it is seen outside.
    """

    def __init__(
        self,
        kind: InventoryErrorKind,
        message: str,
        product_id: Optional[str] = None,
        delta: Optional[Decimal] = None,
    ):
        self.kind = kind
        self.product_id = product_id
        self.delta = delta
        super().__init__(message, code=kind.value)


class InsufficientStockError(InventoryError):
    """Raised when attempting to remove more units than are on hand."""

    def __init__(
        self,
        product_id: str,
        requested: Decimal,
        available: Decimal,
    ):
        self.requested = requested
        self.available = available
        super().__init__(
            InventoryErrorKind.INSUFFICIENT_STOCK,
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}",
            product_id=product_id,
            delta=-requested,
        )


class ContentionExhaustedError(InventoryError):
    """Raised when every adjustment attempt reported no rows changed. Safe to retry later."""

    def __init__(
        self,
        product_id: Optional[str],
        delta: Optional[Decimal],
        attempts: int,
    ):
        self.attempts = attempts
        target = f"product {product_id}" if product_id else "aggregate read"
        super().__init__(
            InventoryErrorKind.CONTENTION_EXHAUSTED,
            f"Could not update {target} after {attempts} attempts; try again later",
            product_id=product_id,
            delta=delta,
        )


class OperationTimeoutError(InventoryError):
    """Raised when a unit of work runs past its deadline."""

    def __init__(
        self,
        message: str = "Operation deadline exceeded",
        product_id: Optional[str] = None,
        delta: Optional[Decimal] = None,
    ):
        super().__init__(
            InventoryErrorKind.TIMEOUT,
            message,
            product_id=product_id,
            delta=delta,
        )


class OperationCancelledError(InventoryError):
    """Raised when the caller cancels a unit of work before it commits."""

    def __init__(
        self,
        message: str = "Operation cancelled by caller",
        product_id: Optional[str] = None,
        delta: Optional[Decimal] = None,
    ):
        super().__init__(
            InventoryErrorKind.CANCELLED,
            message,
            product_id=product_id,
            delta=delta,
        )
