"""SQLAlchemy implementation of LedgerRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from stockledger.core.timezone import to_local, to_naive_local
from stockledger.domain.models import LedgerRecord, LedgerKind
from stockledger.domain.views import TopSellerView
from stockledger.repositories.sqlalchemy.orm_models import LedgerRecordORM

CENTS = Decimal("0.01")


class SqlAlchemyLedgerRepository:
    """SQLAlchemy-backed ledger repository (flushes; the unit of work commits)."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, record: LedgerRecord) -> LedgerRecord:
        """Persist a new ledger record."""
        orm_record = LedgerRecordORM(record_id=record.record_id)
        self._copy_to_orm(record, orm_record)
        orm_record.created_at = to_naive_local(record.created_at)
        self._db.add(orm_record)
        self._db.flush()
        return self._to_domain(orm_record)

    def get_by_id(self, record_id: str) -> Optional[LedgerRecord]:
        """Retrieve ledger record by ID."""
        orm_record = self._db.get(LedgerRecordORM, record_id)
        return self._to_domain(orm_record) if orm_record else None

    def update(self, record: LedgerRecord) -> LedgerRecord:
        """Update an existing ledger record."""
        orm_record = self._db.get(LedgerRecordORM, record.record_id)
        if not orm_record:
            raise ValueError(f"Ledger record not found: {record.record_id}")

        self._copy_to_orm(record, orm_record)
        self._db.flush()
        return self._to_domain(orm_record)

    def delete(self, record_id: str) -> None:
        """Delete a ledger record."""
        self._db.query(LedgerRecordORM).filter(
            LedgerRecordORM.record_id == record_id
        ).delete(synchronize_session="fetch")
        self._db.flush()

    def query(
        self,
        kind: Optional[LedgerKind] = None,
        product_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_reversed: bool = False,
    ) -> list[LedgerRecord]:
        """Query ledger records with filters."""
        query = self._db.query(LedgerRecordORM)

        conditions = []
        if kind:
            conditions.append(LedgerRecordORM.kind == kind)
        if product_id:
            conditions.append(LedgerRecordORM.product_id == product_id)
        if start:
            conditions.append(LedgerRecordORM.occurred_at >= to_naive_local(start))
        if end:
            conditions.append(LedgerRecordORM.occurred_at < to_naive_local(end))
        if not include_reversed:
            conditions.append(LedgerRecordORM.is_reversed == False)  # noqa: E712

        if conditions:
            query = query.filter(and_(*conditions))

        query = query.order_by(LedgerRecordORM.occurred_at)
        return [self._to_domain(r) for r in query.all()]

    def count_by_product(self, product_id: str) -> int:
        """Count ledger records referencing a product."""
        return (
            self._db.query(func.count(LedgerRecordORM.record_id))
            .filter(LedgerRecordORM.product_id == product_id)
            .scalar()
            or 0
        )

    def summarize(
        self,
        kind: LedgerKind,
        start: datetime,
        end: datetime,
    ) -> tuple[Decimal, Decimal]:
        """Return (sum of totals, sum of profit) of active records in [start, end)."""
        total, profit = (
            self._db.query(
                func.coalesce(func.sum(LedgerRecordORM.total), 0),
                func.coalesce(func.sum(LedgerRecordORM.profit), 0),
            )
            .filter(
                LedgerRecordORM.kind == kind,
                LedgerRecordORM.is_reversed == False,  # noqa: E712
                LedgerRecordORM.occurred_at >= to_naive_local(start),
                LedgerRecordORM.occurred_at < to_naive_local(end),
            )
            .one()
        )
        return Decimal(str(total)).quantize(CENTS), Decimal(str(profit)).quantize(CENTS)

    def top_sellers(self, limit: int) -> list[TopSellerView]:
        """Products ranked by quantity sold."""
        quantity_sold = func.sum(LedgerRecordORM.quantity).label("quantity_sold")
        rows = (
            self._db.query(
                LedgerRecordORM.product_id,
                func.max(LedgerRecordORM.product_name),
                quantity_sold,
                func.count(LedgerRecordORM.record_id),
                func.sum(LedgerRecordORM.total),
            )
            .filter(
                LedgerRecordORM.kind == LedgerKind.SALE,
                LedgerRecordORM.is_reversed == False,  # noqa: E712
            )
            .group_by(LedgerRecordORM.product_id)
            .order_by(quantity_sold.desc(), LedgerRecordORM.product_id)
            .limit(limit)
            .all()
        )
        return [
            TopSellerView(
                product_id=product_id,
                product_name=product_name,
                quantity_sold=Decimal(str(sold)),
                times_sold=times_sold,
                revenue=Decimal(str(revenue)).quantize(CENTS),
            )
            for product_id, product_name, sold, times_sold, revenue in rows
        ]

    @staticmethod
    def _copy_to_orm(record: LedgerRecord, orm: LedgerRecordORM) -> None:
        """Copy mutable fields from the domain record onto the ORM row."""
        orm.kind = record.kind
        orm.product_id = record.product_id
        orm.product_name = record.product_name
        orm.quantity = record.quantity
        orm.unit_value = record.unit_value
        orm.unit_cost = record.unit_cost
        orm.total = record.total
        orm.profit = record.profit
        orm.counterparty = record.counterparty
        orm.payment_method = record.payment_method
        orm.invoice_number = record.invoice_number
        orm.notes = record.notes
        orm.occurred_at = to_naive_local(record.occurred_at)
        orm.is_reversed = record.is_reversed
        orm.reversed_at = to_naive_local(record.reversed_at) if record.reversed_at else None
        orm.updated_at = to_naive_local(record.updated_at) if record.updated_at else None

    @staticmethod
    def _to_domain(orm: LedgerRecordORM) -> LedgerRecord:
        """Convert ORM model to domain model."""
        return LedgerRecord(
            record_id=orm.record_id,
            kind=orm.kind,
            product_id=orm.product_id,
            product_name=orm.product_name,
            quantity=Decimal(str(orm.quantity)),
            unit_value=Decimal(str(orm.unit_value)),
            unit_cost=Decimal(str(orm.unit_cost)) if orm.unit_cost is not None else None,
            total=Decimal(str(orm.total)),
            profit=Decimal(str(orm.profit)) if orm.profit is not None else None,
            counterparty=orm.counterparty,
            payment_method=orm.payment_method,
            invoice_number=orm.invoice_number,
            notes=orm.notes,
            occurred_at=to_local(orm.occurred_at),
            is_reversed=orm.is_reversed,
            reversed_at=to_local(orm.reversed_at) if orm.reversed_at else None,
            created_at=to_local(orm.created_at) if orm.created_at else None,
            updated_at=to_local(orm.updated_at) if orm.updated_at else None,
        )
