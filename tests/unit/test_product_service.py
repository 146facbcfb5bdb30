"""
Unit tests for ProductService.

Tests cover:
- Product creation and case-insensitive name uniqueness
- Listing, search and in-stock filtering
- Editing descriptive fields and price
- Deletion guarded by ledger references
- Inventory value
"""

from decimal import Decimal

import pytest

from stockledger.core.exceptions import DuplicateProductError, NotFoundError, ValidationError
from stockledger.services import ProductService, ProductCreate, ProductUpdate


# =============================================================================
# CREATE PRODUCT TESTS
# =============================================================================


class TestCreateProduct:
    """Tests for product creation."""

    def test_create_product_persists_fields(
        self,
        product_service: ProductService,
        fixed_now,
    ):
        """
        GIVEN no products exist
        WHEN I create "Widget" in "Hardware" with 10 units at 5.00
        THEN the product is persisted with those values
        """
        product = product_service.create_product(
            ProductCreate(
                name="  Widget ",
                category="Hardware",
                quantity=Decimal("10"),
                unit_price=Decimal("5.00"),
            )
        )

        assert product.product_id is not None
        assert product.name == "Widget"
        assert product.quantity == Decimal("10")
        assert product.created_at == fixed_now
        assert product_service.get_product(product.product_id).category == "Hardware"

    def test_duplicate_name_differing_in_case_fails(
        self,
        product_service: ProductService,
        product_factory,
    ):
        """
        GIVEN a product named "Widget"
        WHEN I create a product named "WIDGET"
        THEN DuplicateProductError is raised
        """
        product_factory(name="Widget")

        with pytest.raises(DuplicateProductError) as exc_info:
            product_service.create_product(ProductCreate(name="WIDGET", category="Other"))

        assert exc_info.value.code == "DUPLICATE_PRODUCT"
        assert "already exists" in exc_info.value.message

    @pytest.mark.parametrize(
        "data",
        [
            ProductCreate(name="", category="A"),
            ProductCreate(name="X", category=" "),
            ProductCreate(name="X", category="A", quantity=Decimal("-1")),
            ProductCreate(name="X", category="A", unit_price=Decimal("-0.01")),
        ],
    )
    def test_invalid_product_rejected(
        self,
        product_service: ProductService,
        data: ProductCreate,
    ):
        with pytest.raises(ValidationError):
            product_service.create_product(data)


# =============================================================================
# QUERY TESTS
# =============================================================================


class TestQueryProducts:
    """Tests for listing and searching products."""

    def test_list_products_sorted_by_name(
        self,
        product_service: ProductService,
        product_factory,
    ):
        product_factory(name="Gamma")
        product_factory(name="Alpha")
        product_factory(name="Beta")

        names = [p.name for p in product_service.list_products()]

        assert names == ["Alpha", "Beta", "Gamma"]

    def test_search_is_case_insensitive_contains(
        self,
        product_service: ProductService,
        product_factory,
    ):
        product_factory(name="Blue Widget")
        product_factory(name="Red widget")
        product_factory(name="Gadget")

        found = product_service.search_products("WIDG")

        assert {p.name for p in found} == {"Blue Widget", "Red widget"}

    def test_blank_search_lists_everything(
        self,
        product_service: ProductService,
        product_factory,
    ):
        product_factory()
        product_factory()

        assert len(product_service.search_products("  ")) == 2

    def test_list_in_stock_excludes_empty_products(
        self,
        product_service: ProductService,
        product_factory,
    ):
        product_factory(name="Empty")
        product_factory(name="Stocked", quantity=Decimal("3"))

        assert [p.name for p in product_service.list_in_stock()] == ["Stocked"]

    def test_get_unknown_product_raises_not_found(self, product_service: ProductService):
        with pytest.raises(NotFoundError):
            product_service.get_product("missing")

    def test_total_inventory_value(
        self,
        product_service: ProductService,
        product_factory,
    ):
        """
        GIVEN 10 units at 5.00 and 4 units at 2.50
        WHEN computing the inventory value
        THEN it is 60.00
        """
        product_factory(quantity=Decimal("10"), unit_price=Decimal("5.00"))
        product_factory(quantity=Decimal("4"), unit_price=Decimal("2.50"))

        assert product_service.total_inventory_value() == Decimal("60.00")


# =============================================================================
# UPDATE AND DELETE TESTS
# =============================================================================


class TestUpdateProduct:
    """Tests for editing products."""

    def test_update_name_category_and_price(
        self,
        product_service: ProductService,
        widget,
        clock,
    ):
        clock.advance(60)

        updated = product_service.update_product(
            widget.product_id,
            ProductUpdate(name="Widget XL", category="Large", unit_price=Decimal("7.50")),
        )

        assert updated.name == "Widget XL"
        assert updated.category == "Large"
        assert updated.unit_price == Decimal("7.50")
        assert updated.quantity == Decimal("10")
        assert updated.updated_at == clock.now

    def test_renaming_to_own_name_in_other_case_is_allowed(
        self,
        product_service: ProductService,
        widget,
    ):
        updated = product_service.update_product(widget.product_id, ProductUpdate(name="WIDGET"))

        assert updated.name == "WIDGET"

    def test_renaming_onto_another_product_fails(
        self,
        product_service: ProductService,
        product_factory,
        widget,
    ):
        product_factory(name="Gadget")

        with pytest.raises(DuplicateProductError):
            product_service.update_product(widget.product_id, ProductUpdate(name="gadget"))

    def test_update_unknown_product_raises_not_found(self, product_service: ProductService):
        with pytest.raises(NotFoundError):
            product_service.update_product("missing", ProductUpdate(category="X"))


class TestDeleteProduct:
    """Tests for deleting products."""

    def test_delete_unreferenced_product(
        self,
        product_service: ProductService,
        widget,
    ):
        product_service.delete_product(widget.product_id)

        with pytest.raises(NotFoundError):
            product_service.get_product(widget.product_id)

    def test_delete_referenced_product_refused(
        self,
        product_service: ProductService,
        widget,
        sale_factory,
    ):
        """
        GIVEN "Widget" has a sale on record
        WHEN I delete it
        THEN ValidationError is raised and the product remains
        """
        sale_factory(widget.product_id, Decimal("1"))

        with pytest.raises(ValidationError):
            product_service.delete_product(widget.product_id)

        assert product_service.get_product(widget.product_id).quantity == Decimal("9")
