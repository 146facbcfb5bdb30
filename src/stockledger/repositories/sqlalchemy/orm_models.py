"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    Text,
    Integer,
    Numeric,
    Index,
    CheckConstraint,
    DDL,
    Enum as SqlEnum,
    event,
    func,
)

from stockledger.repositories.sqlalchemy.database import Base
from stockledger.domain.models.enums import LedgerKind


class ProductORM(Base):
    """SQLAlchemy model for Product (stock counter lives in `quantity`)."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    product_id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False)
    quantity = Column(Numeric(precision=18, scale=4), nullable=False, default=Decimal("0"))
    unit_price = Column(Numeric(precision=18, scale=2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)


# Case-insensitive uniqueness of product names
Index("uq_products_name_lower", func.lower(ProductORM.name), unique=True)


class LedgerRecordORM(Base):
    """SQLAlchemy model for LedgerRecord (purchase or sale)."""

    __tablename__ = "ledger_records"

    record_id = Column(String(36), primary_key=True)
    kind = Column(SqlEnum(LedgerKind), nullable=False, index=True)
    # Relation only: products are not owned by their ledger records
    product_id = Column(String(36), nullable=False, index=True)
    product_name = Column(String(100), nullable=False)
    quantity = Column(Numeric(precision=18, scale=4), nullable=False)
    unit_value = Column(Numeric(precision=18, scale=2), nullable=False)
    unit_cost = Column(Numeric(precision=18, scale=2), nullable=True)
    total = Column(Numeric(precision=18, scale=2), nullable=False)
    profit = Column(Numeric(precision=18, scale=2), nullable=True)
    counterparty = Column(String(100), nullable=True)
    payment_method = Column(String(50), nullable=True)
    invoice_number = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    occurred_at = Column(DateTime, nullable=False, index=True)
    is_reversed = Column(Boolean, nullable=False, default=False)
    reversed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)


class CacheEntryORM(Base):
    """SQLAlchemy model for CacheEntry (derived aggregate)."""

    __tablename__ = "aggregate_cache"

    key = Column(String(50), primary_key=True)
    payload = Column(Text, nullable=False)
    generation = Column(Integer, nullable=False)
    computed_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=True)


class CacheGenerationORM(Base):
    """Single-row counter bumped by every cache invalidation."""

    __tablename__ = "cache_generation"

    id = Column(Integer, primary_key=True)
    generation = Column(Integer, nullable=False, default=0)


event.listen(
    CacheGenerationORM.__table__,
    "after_create",
    DDL("INSERT INTO cache_generation (id, generation) VALUES (1, 0)"),
)
