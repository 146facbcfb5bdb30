"""Inventory service: purchases, sales and their reversal."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from stockledger.config.settings import Settings, get_settings
from stockledger.core.exceptions import (
    DuplicateProductError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from stockledger.core.scope import OperationScope
from stockledger.core.timezone import now_local
from stockledger.domain.models import (
    LedgerKind,
    LedgerRecord,
    Product,
    compute_profit,
    compute_total,
)
from stockledger.services.cache_invalidator import aggregates_for_ledger
from stockledger.services.stock_adjuster import StockAdjuster
from stockledger.services.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class PurchaseCreate:
    """Input data for registering a purchase."""

    quantity: Decimal
    unit_cost: Decimal
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    supplier: Optional[str] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    occurred_at: Optional[datetime] = None


@dataclass
class SaleCreate:
    """Input data for registering a sale."""

    quantity: Decimal
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    unit_price: Optional[Decimal] = None
    unit_cost: Optional[Decimal] = None
    customer: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    occurred_at: Optional[datetime] = None


@dataclass
class LedgerRecordUpdate:
    """Partial update data for amending a ledger record."""

    product_id: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_value: Optional[Decimal] = None
    unit_cost: Optional[Decimal] = None
    counterparty: Optional[str] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    occurred_at: Optional[datetime] = None


class InventoryService:
    """
    Service for stock movements.

    Every operation runs as one unit of work: the stock adjustment, the
    ledger write and the cache invalidation commit together or not at all.
    The ledger is the history; product quantities are the running counter
    the ledger explains.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = now_local,
        settings: Optional[Settings] = None,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def register_purchase(
        self,
        data: PurchaseCreate,
        scope: Optional[OperationScope] = None,
    ) -> LedgerRecord:
        """
        Record incoming stock, creating the product on its first purchase.

        If a concurrent first purchase of the same name wins the race to
        create the product, this purchase is retried once and lands on the
        winner's row.
        """
        self._validate_purchase(data)
        scope = scope or self._new_scope()

        try:
            return self._register_purchase(data, scope)
        except DuplicateProductError as exc:
            logger.info(f"Product '{exc.name}' was created concurrently; retrying purchase")
            return self._register_purchase(data, scope)

    def _register_purchase(self, data: PurchaseCreate, scope: OperationScope) -> LedgerRecord:
        with self._unit(scope) as uow:
            now = self._clock()
            product = self._resolve_purchase_product(uow, data, now)

            self._adjuster(uow).adjust_with_retry(product.product_id, data.quantity, scope)

            if data.unit_cost > 0 and product.unit_price != data.unit_cost:
                product.unit_price = data.unit_cost
                product.updated_at = now
                uow.products.update(product)

            record = LedgerRecord(
                record_id=str(uuid.uuid4()),
                kind=LedgerKind.PURCHASE,
                product_id=product.product_id,
                product_name=product.name,
                quantity=data.quantity,
                unit_value=data.unit_cost,
                total=compute_total(data.unit_cost, data.quantity),
                counterparty=data.supplier,
                payment_method=data.payment_method,
                invoice_number=data.invoice_number,
                notes=data.notes,
                occurred_at=data.occurred_at or now,
                created_at=now,
            )
            created = uow.ledger.create(record)

            uow.invalidate(aggregates_for_ledger(LedgerKind.PURCHASE))
            uow.commit()

        logger.info(
            f"Registered purchase {created.record_id}: +{created.quantity} of "
            f"{created.product_name}"
        )
        return created

    def _resolve_purchase_product(
        self,
        uow: SqlAlchemyUnitOfWork,
        data: PurchaseCreate,
        now: datetime,
    ) -> Product:
        """Find the purchased product by id, then by name, else create it empty."""
        if data.product_id:
            product = uow.products.get_by_id(data.product_id)
            if product:
                return product
            if not data.product_name:
                raise NotFoundError("Product", data.product_id)

        product = uow.products.get_by_name(data.product_name)
        if product:
            return product

        product = Product(
            product_id=str(uuid.uuid4()),
            name=data.product_name.strip(),
            category=self._settings.default_purchase_category,
            quantity=Decimal("0"),
            unit_price=data.unit_cost,
            created_at=now,
        )
        created = uow.products.create(product)
        logger.info(f"Created product {created.product_id} ({created.name}) from purchase")
        return created

    def _validate_purchase(self, data: PurchaseCreate) -> None:
        if not data.product_id and not (data.product_name and data.product_name.strip()):
            raise ValidationError("Purchase requires a product id or product name")
        if data.quantity is None or data.quantity <= 0:
            raise ValidationError("Purchase quantity must be positive")
        if data.unit_cost is None or data.unit_cost < 0:
            raise ValidationError("Unit cost cannot be negative")

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def register_sale(
        self,
        data: SaleCreate,
        scope: Optional[OperationScope] = None,
    ) -> LedgerRecord:
        """
        Record outgoing stock.

        Fails with InsufficientStockError, leaving the quantity untouched,
        when fewer units are on hand than requested.
        """
        self._validate_sale(data)
        scope = scope or self._new_scope()

        with self._unit(scope) as uow:
            now = self._clock()
            product = self._resolve_sale_product(uow, data)

            self._apply_delta(uow, product.product_id, -data.quantity, scope)

            unit_price = data.unit_price if data.unit_price is not None else product.unit_price
            unit_cost = data.unit_cost if data.unit_cost is not None else product.unit_price

            record = LedgerRecord(
                record_id=str(uuid.uuid4()),
                kind=LedgerKind.SALE,
                product_id=product.product_id,
                product_name=product.name,
                quantity=data.quantity,
                unit_value=unit_price,
                unit_cost=unit_cost,
                total=compute_total(unit_price, data.quantity),
                profit=compute_profit(unit_price, unit_cost, data.quantity),
                counterparty=data.customer,
                payment_method=data.payment_method,
                notes=data.notes,
                occurred_at=data.occurred_at or now,
                created_at=now,
            )
            created = uow.ledger.create(record)

            uow.invalidate(aggregates_for_ledger(LedgerKind.SALE))
            uow.commit()

        logger.info(
            f"Registered sale {created.record_id}: -{created.quantity} of "
            f"{created.product_name}"
        )
        return created

    @staticmethod
    def _resolve_sale_product(uow: SqlAlchemyUnitOfWork, data: SaleCreate) -> Product:
        if data.product_id:
            product = uow.products.get_by_id(data.product_id)
            if not product:
                raise NotFoundError("Product", data.product_id)
            return product

        product = uow.products.get_by_name(data.product_name)
        if not product:
            raise NotFoundError("Product", data.product_name)
        return product

    def _validate_sale(self, data: SaleCreate) -> None:
        if not data.product_id and not (data.product_name and data.product_name.strip()):
            raise ValidationError("Sale requires a product id or product name")
        if data.quantity is None or data.quantity <= 0:
            raise ValidationError("Sale quantity must be positive")
        if data.unit_price is not None and data.unit_price < 0:
            raise ValidationError("Unit price cannot be negative")
        if data.unit_cost is not None and data.unit_cost < 0:
            raise ValidationError("Unit cost cannot be negative")

    # ------------------------------------------------------------------
    # Ledger records
    # ------------------------------------------------------------------

    def get_ledger_record(self, record_id: str) -> LedgerRecord:
        """Get ledger record by ID."""
        with self._unit() as uow:
            record = uow.ledger.get_by_id(record_id)
        if not record:
            raise NotFoundError("Ledger record", record_id)
        return record

    def list_ledger_records(
        self,
        kind: Optional[LedgerKind] = None,
        product_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_reversed: bool = False,
    ) -> list[LedgerRecord]:
        """List ledger records, oldest first."""
        with self._unit() as uow:
            return uow.ledger.query(
                kind=kind,
                product_id=product_id,
                start=start,
                end=end,
                include_reversed=include_reversed,
            )

    def reverse_ledger_record(
        self,
        record_id: str,
        scope: Optional[OperationScope] = None,
    ) -> LedgerRecord:
        """
        Undo a record's stock effect and mark it reversed.

        Reversing an already reversed record returns it unchanged. Reversing
        a purchase whose units were already sold fails with
        InsufficientStockError.
        """
        scope = scope or self._new_scope()

        with self._unit(scope) as uow:
            record = uow.ledger.get_by_id(record_id)
            if not record:
                raise NotFoundError("Ledger record", record_id)
            if record.is_reversed:
                return record

            self._apply_delta(uow, record.product_id, -record.stock_delta, scope)

            now = self._clock()
            record.is_reversed = True
            record.reversed_at = now
            record.updated_at = now
            reversed_record = uow.ledger.update(record)

            uow.invalidate(aggregates_for_ledger(record.kind))
            uow.commit()

        logger.info(f"Reversed {record.kind.value.lower()} {record_id}")
        return reversed_record

    def update_ledger_record(
        self,
        record_id: str,
        patch: LedgerRecordUpdate,
        scope: Optional[OperationScope] = None,
    ) -> LedgerRecord:
        """
        Amend a ledger record.

        When the product or quantity changes, the old stock effect is
        undone and the new one applied in the same unit; total and profit
        are recomputed from the amended values.
        """
        self._validate_update(patch)
        scope = scope or self._new_scope()

        with self._unit(scope) as uow:
            record = uow.ledger.get_by_id(record_id)
            if not record:
                raise NotFoundError("Ledger record", record_id)
            if record.is_reversed:
                raise ValidationError("Cannot edit a reversed ledger record")

            new_product_id = patch.product_id or record.product_id
            new_quantity = patch.quantity if patch.quantity is not None else record.quantity

            if new_product_id != record.product_id:
                new_product = uow.products.get_by_id(new_product_id)
                if not new_product:
                    raise NotFoundError("Product", new_product_id)
                self._apply_delta(uow, record.product_id, -record.stock_delta, scope)
                self._apply_delta(uow, new_product_id, new_quantity * record.kind.sign, scope)
                record.product_id = new_product.product_id
                record.product_name = new_product.name
            elif new_quantity != record.quantity:
                net_delta = (new_quantity - record.quantity) * record.kind.sign
                self._apply_delta(uow, record.product_id, net_delta, scope)

            record.quantity = new_quantity
            if patch.unit_value is not None:
                record.unit_value = patch.unit_value
            if patch.unit_cost is not None and record.is_sale:
                record.unit_cost = patch.unit_cost
            if patch.counterparty is not None:
                record.counterparty = patch.counterparty
            if patch.payment_method is not None:
                record.payment_method = patch.payment_method
            if patch.invoice_number is not None:
                record.invoice_number = patch.invoice_number
            if patch.notes is not None:
                record.notes = patch.notes
            if patch.occurred_at is not None:
                record.occurred_at = patch.occurred_at

            record.total = compute_total(record.unit_value, record.quantity)
            if record.is_sale:
                unit_cost = record.unit_cost if record.unit_cost is not None else Decimal("0")
                record.profit = compute_profit(record.unit_value, unit_cost, record.quantity)
            record.updated_at = self._clock()

            updated = uow.ledger.update(record)
            uow.invalidate(aggregates_for_ledger(record.kind))
            uow.commit()

        logger.info(f"Updated {record.kind.value.lower()} {record_id}")
        return updated

    def delete_ledger_record(
        self,
        record_id: str,
        scope: Optional[OperationScope] = None,
    ) -> None:
        """Undo a record's stock effect (unless already reversed) and delete it."""
        scope = scope or self._new_scope()

        with self._unit(scope) as uow:
            record = uow.ledger.get_by_id(record_id)
            if not record:
                raise NotFoundError("Ledger record", record_id)

            if not record.is_reversed:
                self._apply_delta(uow, record.product_id, -record.stock_delta, scope)
            uow.ledger.delete(record_id)

            uow.invalidate(aggregates_for_ledger(record.kind))
            uow.commit()

        logger.info(f"Deleted {record.kind.value.lower()} {record_id}")

    def _validate_update(self, patch: LedgerRecordUpdate) -> None:
        if patch.quantity is not None and patch.quantity <= 0:
            raise ValidationError("Quantity must be positive")
        if patch.unit_value is not None and patch.unit_value < 0:
            raise ValidationError("Unit value cannot be negative")
        if patch.unit_cost is not None and patch.unit_cost < 0:
            raise ValidationError("Unit cost cannot be negative")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_delta(
        self,
        uow: SqlAlchemyUnitOfWork,
        product_id: str,
        delta: Decimal,
        scope: OperationScope,
    ) -> None:
        """Adjust stock, failing fast when a removal exceeds the units on hand."""
        if delta == 0:
            return
        if delta < 0:
            product = uow.products.get_by_id(product_id)
            if not product:
                raise NotFoundError("Product", product_id)
            if not product.has_stock_for(-delta):
                raise InsufficientStockError(product_id, -delta, product.quantity)
        self._adjuster(uow).adjust_with_retry(product_id, delta, scope)

    def _adjuster(self, uow: SqlAlchemyUnitOfWork) -> StockAdjuster:
        return StockAdjuster(
            uow.products,
            clock=self._clock,
            max_attempts=self._settings.adjust_max_attempts,
            backoff_seconds=self._settings.adjust_backoff_seconds,
        )

    def _unit(self, scope: Optional[OperationScope] = None) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self._session_factory, scope or self._new_scope())

    def _new_scope(self) -> OperationScope:
        return OperationScope(timeout_seconds=self._settings.operation_timeout_seconds)
