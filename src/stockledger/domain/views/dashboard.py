"""View models for read-side aggregates."""

import json
from dataclasses import dataclass, asdict, field
from datetime import datetime
from decimal import Decimal


@dataclass
class TopSellerView:
    """Product ranked by quantity sold."""

    product_id: str
    product_name: str
    quantity_sold: Decimal
    times_sold: int
    revenue: Decimal


@dataclass
class LowStockView:
    """Product at or below the low-stock threshold."""

    product_id: str
    name: str
    category: str
    quantity: Decimal


@dataclass
class DashboardView:
    """Consolidated dashboard summary."""

    total_products: int
    products_in_stock: int
    products_low_stock: int
    inventory_value: Decimal
    sales_today: Decimal
    profit_today: Decimal
    sales_month: Decimal
    profit_month: Decimal
    purchases_month: Decimal
    generated_at: datetime
    top_sellers: list[TopSellerView] = field(default_factory=list)


def to_payload(value) -> str:
    """Serialize a view (or list of views) to JSON for the aggregate cache."""
    if isinstance(value, list):
        data = [asdict(item) for item in value]
    else:
        data = asdict(value)
    return json.dumps(data, default=_encode)


def dashboard_from_payload(payload: str) -> DashboardView:
    data = json.loads(payload)
    return DashboardView(
        total_products=data["total_products"],
        products_in_stock=data["products_in_stock"],
        products_low_stock=data["products_low_stock"],
        inventory_value=Decimal(data["inventory_value"]),
        sales_today=Decimal(data["sales_today"]),
        profit_today=Decimal(data["profit_today"]),
        sales_month=Decimal(data["sales_month"]),
        profit_month=Decimal(data["profit_month"]),
        purchases_month=Decimal(data["purchases_month"]),
        generated_at=datetime.fromisoformat(data["generated_at"]),
        top_sellers=[_top_seller(item) for item in data["top_sellers"]],
    )


def top_sellers_from_payload(payload: str) -> list[TopSellerView]:
    return [_top_seller(item) for item in json.loads(payload)]


def low_stock_from_payload(payload: str) -> list[LowStockView]:
    return [
        LowStockView(
            product_id=item["product_id"],
            name=item["name"],
            category=item["category"],
            quantity=Decimal(item["quantity"]),
        )
        for item in json.loads(payload)
    ]


def _top_seller(item: dict) -> TopSellerView:
    return TopSellerView(
        product_id=item["product_id"],
        product_name=item["product_name"],
        quantity_sold=Decimal(item["quantity_sold"]),
        times_sold=item["times_sold"],
        revenue=Decimal(item["revenue"]),
    )


def _encode(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")
