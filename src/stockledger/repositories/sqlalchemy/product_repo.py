"""SQLAlchemy implementation of ProductRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockledger.core.exceptions import DuplicateProductError
from stockledger.core.timezone import to_local, to_naive_local
from stockledger.domain.models import Product
from stockledger.repositories.sqlalchemy.orm_models import ProductORM

_products = ProductORM.__table__
CENTS = Decimal("0.01")
# Scale of the quantity column
QUANTITY_STEP = Decimal("0.0001")


class SqlAlchemyProductRepository:
    """
    SQLAlchemy-backed product repository.

    Writes are flushed, never committed: the unit of work owning the session
    decides whether they become durable.
    """

    def __init__(self, db: Session):
        self._db = db

    def create(self, product: Product) -> Product:
        """Persist a new product."""
        orm_product = ProductORM(
            product_id=product.product_id,
            name=product.name,
            category=product.category,
            quantity=product.quantity,
            unit_price=product.unit_price,
            created_at=to_naive_local(product.created_at),
            updated_at=None,
        )
        self._db.add(orm_product)
        try:
            self._db.flush()
        except IntegrityError as exc:
            raise DuplicateProductError(product.name) from exc
        return self._to_domain(orm_product)

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Retrieve product by ID."""
        # populate_existing: the counter may have moved through a Core UPDATE
        orm_product = self._db.get(ProductORM, product_id, populate_existing=True)
        return self._to_domain(orm_product) if orm_product else None

    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve product by name, case-insensitively."""
        stmt = (
            select(ProductORM)
            .where(func.lower(ProductORM.name) == func.lower(name.strip()))
            .execution_options(populate_existing=True)
        )
        orm_product = self._db.execute(stmt).scalars().first()
        return self._to_domain(orm_product) if orm_product else None

    def list_all(self) -> list[Product]:
        """List all products."""
        orm_products = self._db.query(ProductORM).order_by(ProductORM.name).all()
        return [self._to_domain(p) for p in orm_products]

    def search(self, text: str) -> list[Product]:
        """List products whose name contains text."""
        pattern = f"%{text.strip().lower()}%"
        orm_products = (
            self._db.query(ProductORM)
            .filter(func.lower(ProductORM.name).like(pattern))
            .order_by(ProductORM.name)
            .all()
        )
        return [self._to_domain(p) for p in orm_products]

    def list_in_stock(self) -> list[Product]:
        """List products with quantity > 0."""
        orm_products = (
            self._db.query(ProductORM)
            .filter(ProductORM.quantity > 0)
            .order_by(ProductORM.name)
            .all()
        )
        return [self._to_domain(p) for p in orm_products]

    def list_low_stock(self, threshold: Decimal) -> list[Product]:
        """List products with quantity <= threshold."""
        orm_products = (
            self._db.query(ProductORM)
            .filter(ProductORM.quantity <= threshold)
            .order_by(ProductORM.quantity, ProductORM.name)
            .all()
        )
        return [self._to_domain(p) for p in orm_products]

    def update(self, product: Product) -> Product:
        """Update name, category and unit price of an existing product."""
        orm_product = self._db.get(ProductORM, product.product_id, populate_existing=True)
        if not orm_product:
            raise ValueError(f"Product not found: {product.product_id}")

        orm_product.name = product.name
        orm_product.category = product.category
        orm_product.unit_price = product.unit_price
        orm_product.updated_at = to_naive_local(product.updated_at) if product.updated_at else None

        try:
            self._db.flush()
        except IntegrityError as exc:
            raise DuplicateProductError(product.name) from exc
        return self._to_domain(orm_product)

    def delete(self, product_id: str) -> None:
        """Delete a product."""
        self._db.query(ProductORM).filter(
            ProductORM.product_id == product_id
        ).delete(synchronize_session=False)
        self._db.flush()

    def increment_quantity(
        self,
        product_id: str,
        delta: Decimal,
        updated_at: datetime,
    ) -> int:
        """
        Apply quantity = quantity + delta if the product exists and stays >= 0.

        Both sides are rounded to the column scale, since SQLite evaluates
        NUMERIC arithmetic in floating point.
        """
        delta = delta.quantize(QUANTITY_STEP)
        new_quantity = func.round(_products.c.quantity + delta, 4)
        stmt = (
            update(_products)
            .where(_products.c.product_id == product_id)
            .where(new_quantity >= 0)
            .values(
                quantity=new_quantity,
                updated_at=to_naive_local(updated_at),
            )
        )
        result = self._db.execute(stmt)
        return result.rowcount

    def get_quantity(self, product_id: str) -> Optional[Decimal]:
        """Re-read the current quantity from the store."""
        quantity = self._db.execute(
            select(_products.c.quantity).where(_products.c.product_id == product_id)
        ).scalar_one_or_none()
        return Decimal(str(quantity)) if quantity is not None else None

    def count_all(self) -> int:
        return self._db.query(func.count(ProductORM.product_id)).scalar() or 0

    def count_in_stock(self) -> int:
        return (
            self._db.query(func.count(ProductORM.product_id))
            .filter(ProductORM.quantity > 0)
            .scalar()
            or 0
        )

    def count_low_stock(self, threshold: Decimal) -> int:
        return (
            self._db.query(func.count(ProductORM.product_id))
            .filter(ProductORM.quantity <= threshold)
            .scalar()
            or 0
        )

    def total_value(self) -> Decimal:
        """Sum of quantity x unit_price."""
        value = self._db.query(
            func.coalesce(func.sum(ProductORM.quantity * ProductORM.unit_price), 0)
        ).scalar()
        return Decimal(str(value)).quantize(CENTS)

    @staticmethod
    def _to_domain(orm: ProductORM) -> Product:
        """Convert ORM model to domain model."""
        return Product(
            product_id=orm.product_id,
            name=orm.name,
            category=orm.category,
            quantity=Decimal(str(orm.quantity)) if orm.quantity else Decimal("0"),
            unit_price=Decimal(str(orm.unit_price)) if orm.unit_price else Decimal("0"),
            created_at=to_local(orm.created_at) if orm.created_at else None,
            updated_at=to_local(orm.updated_at) if orm.updated_at else None,
        )
