"""Product catalogue endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.deps import get_product_service
from stockledger.api.schemas import (
    ProductCreateRequest,
    ProductUpdateRequest,
    ProductResponse,
    ProductListResponse,
    InventoryValueResponse,
)
from stockledger.services import ProductService, ProductCreate, ProductUpdate

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    request: ProductCreateRequest,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Create a new product."""
    product = service.create_product(
        ProductCreate(
            name=request.name,
            category=request.category,
            quantity=request.quantity,
            unit_price=request.unit_price,
        )
    )
    return ProductResponse.model_validate(product)


@router.get("", response_model=ProductListResponse)
def list_products(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    in_stock: bool = Query(False, description="Only products with units on hand"),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    """List products, optionally filtered by name or availability."""
    if in_stock:
        products = service.list_in_stock()
    elif search:
        products = service.search_products(search)
    else:
        products = service.list_products()
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        count=len(products),
    )


@router.get("/inventory-value", response_model=InventoryValueResponse)
def get_inventory_value(
    service: ProductService = Depends(get_product_service),
) -> InventoryValueResponse:
    """Total value of all units on hand."""
    return InventoryValueResponse(inventory_value=service.total_inventory_value())


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Get product by ID."""
    return ProductResponse.model_validate(service.get_product(product_id))


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Edit name, category or price of a product."""
    product = service.update_product(
        product_id,
        ProductUpdate(
            name=request.name,
            category=request.category,
            unit_price=request.unit_price,
        ),
    )
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> None:
    """Delete a product no ledger record references."""
    service.delete_product(product_id)
