"""Atomic stock adjustment with bounded retry."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from stockledger.core.exceptions import (
    ContentionExhaustedError,
    InsufficientStockError,
    OperationCancelledError,
    OperationTimeoutError,
)
from stockledger.core.scope import OperationScope
from stockledger.core.timezone import now_local
from stockledger.repositories.protocols import ProductRepository

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int, base_seconds: float) -> float:
    """Wait before the retry following failed attempt `attempt` (1-based): linear in attempt."""
    return attempt * base_seconds


class StockAdjuster:
    """
    Applies signed quantity deltas to a product through the store's
    conditional increment.

    Each attempt is a single UPDATE guarded by "product exists and
    quantity + delta >= 0"; zero rows changed means the attempt lost and is
    retried after a linear backoff. Runs on the caller's unit of work, so a
    successful adjustment is only durable once that unit commits.
    """

    def __init__(
        self,
        products: ProductRepository,
        clock: Callable[[], datetime] = now_local,
        max_attempts: int = 3,
        backoff_seconds: float = 0.1,
    ):
        self._products = products
        self._clock = clock
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds

    def adjust_with_retry(
        self,
        product_id: str,
        delta: Decimal,
        scope: OperationScope,
        max_attempts: Optional[int] = None,
    ) -> None:
        """
        Change the product's quantity by `delta`.

        Raises:
            InsufficientStockError: delta < 0 and the final re-read shows
                fewer units on hand than requested
            ContentionExhaustedError: every attempt changed zero rows for any
                other reason (including an unknown product)
            OperationTimeoutError / OperationCancelledError: the scope ended
                before an attempt succeeded
        """
        attempts = max_attempts or self._max_attempts

        for attempt in range(1, attempts + 1):
            self._checkpoint(scope, product_id, delta, scope.check)

            changed = self._products.increment_quantity(product_id, delta, self._clock())
            if changed > 0:
                logger.info(f"Adjusted product {product_id} by {delta} on attempt {attempt}")
                return

            logger.warning(
                f"Stock adjustment of {delta} on product {product_id} changed no rows "
                f"(attempt {attempt}/{attempts})"
            )
            if attempt < attempts:
                delay = backoff_delay(attempt, self._backoff_seconds)
                self._checkpoint(scope, product_id, delta, lambda: scope.sleep(delay))

        if delta < 0:
            available = self._products.get_quantity(product_id)
            if available is not None and available < -delta:
                raise InsufficientStockError(product_id, -delta, available)

        logger.error(
            f"Gave up adjusting product {product_id} by {delta} after {attempts} attempts"
        )
        raise ContentionExhaustedError(product_id, delta, attempts)

    @staticmethod
    def _checkpoint(
        scope: OperationScope,
        product_id: str,
        delta: Decimal,
        step: Callable[[], None],
    ) -> None:
        """Run a scope step, tagging an abort with the adjustment it interrupted."""
        try:
            step()
        except (OperationTimeoutError, OperationCancelledError) as exc:
            raise type(exc)(exc.message, product_id=product_id, delta=delta) from exc
