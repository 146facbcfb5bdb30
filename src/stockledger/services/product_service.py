"""Product catalogue service."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from stockledger.config.settings import Settings, get_settings
from stockledger.core.exceptions import DuplicateProductError, NotFoundError, ValidationError
from stockledger.core.scope import OperationScope
from stockledger.core.timezone import now_local
from stockledger.domain.models import Product
from stockledger.services.cache_invalidator import CATALOG_AGGREGATES
from stockledger.services.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class ProductCreate:
    """Input data for creating a product."""

    name: str
    category: str
    quantity: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")


@dataclass
class ProductUpdate:
    """Partial update data for editing a product. Quantity is not editable."""

    name: Optional[str] = None
    category: Optional[str] = None
    unit_price: Optional[Decimal] = None


class ProductService:
    """
    Service for managing the product catalogue.

    Quantities only change through purchases and sales; this service edits
    the descriptive fields and the price.
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

    def create_product(self, data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            data: Name and category are required; quantity is the opening
                stock and defaults to zero

        Returns:
            Created Product instance
        """
        self._validate_create(data)

        with self._unit() as uow:
            if uow.products.get_by_name(data.name):
                raise DuplicateProductError(data.name.strip())

            product = Product(
                product_id=str(uuid.uuid4()),
                name=data.name.strip(),
                category=data.category.strip(),
                quantity=data.quantity,
                unit_price=data.unit_price,
                created_at=self._clock(),
            )
            created = uow.products.create(product)

            uow.invalidate(CATALOG_AGGREGATES)
            uow.commit()

        logger.info(f"Created product {created.product_id} ({created.name})")
        return created

    def get_product(self, product_id: str) -> Product:
        """Get product by ID."""
        with self._unit() as uow:
            product = uow.products.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    def list_products(self) -> list[Product]:
        """List all products by name."""
        with self._unit() as uow:
            return uow.products.list_all()

    def search_products(self, text: str) -> list[Product]:
        """List products whose name contains text, ignoring case."""
        if not text or not text.strip():
            return self.list_products()
        with self._unit() as uow:
            return uow.products.search(text)

    def list_in_stock(self) -> list[Product]:
        """List products with units on hand."""
        with self._unit() as uow:
            return uow.products.list_in_stock()

    def total_inventory_value(self) -> Decimal:
        """Value of all units on hand at current prices."""
        with self._unit() as uow:
            return uow.products.total_value()

    def update_product(self, product_id: str, patch: ProductUpdate) -> Product:
        """Edit name, category or price of a product."""
        self._validate_update(patch)

        with self._unit() as uow:
            product = uow.products.get_by_id(product_id)
            if not product:
                raise NotFoundError("Product", product_id)

            if patch.name is not None:
                existing = uow.products.get_by_name(patch.name)
                if existing and existing.product_id != product_id:
                    raise DuplicateProductError(patch.name.strip())
                product.name = patch.name.strip()
            if patch.category is not None:
                product.category = patch.category.strip()
            if patch.unit_price is not None:
                product.unit_price = patch.unit_price

            product.updated_at = self._clock()
            updated = uow.products.update(product)

            uow.invalidate(CATALOG_AGGREGATES)
            uow.commit()

        logger.info(f"Updated product {product_id}")
        return updated

    def delete_product(self, product_id: str) -> None:
        """Delete a product that no ledger record references."""
        with self._unit() as uow:
            product = uow.products.get_by_id(product_id)
            if not product:
                raise NotFoundError("Product", product_id)

            references = uow.ledger.count_by_product(product_id)
            if references:
                raise ValidationError(
                    f"Cannot delete product '{product.name}': "
                    f"{references} ledger record(s) reference it"
                )

            uow.products.delete(product_id)
            uow.invalidate(CATALOG_AGGREGATES)
            uow.commit()

        logger.info(f"Deleted product {product_id}")

    def _validate_create(self, data: ProductCreate) -> None:
        if not data.name or not data.name.strip():
            raise ValidationError("Product name is required")
        if not data.category or not data.category.strip():
            raise ValidationError("Product category is required")
        if data.quantity is None or data.quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if data.unit_price is None or data.unit_price < 0:
            raise ValidationError("Unit price cannot be negative")

    def _validate_update(self, patch: ProductUpdate) -> None:
        if patch.name is not None and not patch.name.strip():
            raise ValidationError("Product name cannot be empty")
        if patch.category is not None and not patch.category.strip():
            raise ValidationError("Product category cannot be empty")
        if patch.unit_price is not None and patch.unit_price < 0:
            raise ValidationError("Unit price cannot be negative")

    def _unit(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(
            self._session_factory,
            OperationScope(timeout_seconds=self._settings.operation_timeout_seconds),
        )
