"""Purchase, sale and ledger record endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.deps import get_inventory_service
from stockledger.api.schemas import (
    PurchaseCreateRequest,
    SaleCreateRequest,
    LedgerRecordUpdateRequest,
    LedgerRecordResponse,
    LedgerRecordListResponse,
)
from stockledger.domain.models import LedgerKind
from stockledger.services import (
    InventoryService,
    PurchaseCreate,
    SaleCreate,
    LedgerRecordUpdate,
)

purchases_router = APIRouter(prefix="/purchases", tags=["purchases"])
sales_router = APIRouter(prefix="/sales", tags=["sales"])
router = APIRouter(prefix="/ledger", tags=["ledger"])


def _list_response(records) -> LedgerRecordListResponse:
    return LedgerRecordListResponse(
        records=[LedgerRecordResponse.model_validate(r) for r in records],
        count=len(records),
    )


@purchases_router.post("", response_model=LedgerRecordResponse, status_code=status.HTTP_201_CREATED)
def register_purchase(
    request: PurchaseCreateRequest,
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordResponse:
    """Register incoming stock; creates the product on its first purchase."""
    record = service.register_purchase(PurchaseCreate(**request.model_dump()))
    return LedgerRecordResponse.model_validate(record)


@purchases_router.get("", response_model=LedgerRecordListResponse)
def list_purchases(
    product_id: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end: Optional[datetime] = Query(None, description="Exclusive upper bound"),
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordListResponse:
    """List active purchases."""
    return _list_response(
        service.list_ledger_records(LedgerKind.PURCHASE, product_id, start, end)
    )


@sales_router.post("", response_model=LedgerRecordResponse, status_code=status.HTTP_201_CREATED)
def register_sale(
    request: SaleCreateRequest,
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordResponse:
    """Register outgoing stock."""
    record = service.register_sale(SaleCreate(**request.model_dump()))
    return LedgerRecordResponse.model_validate(record)


@sales_router.get("", response_model=LedgerRecordListResponse)
def list_sales(
    product_id: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end: Optional[datetime] = Query(None, description="Exclusive upper bound"),
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordListResponse:
    """List active sales."""
    return _list_response(
        service.list_ledger_records(LedgerKind.SALE, product_id, start, end)
    )


@router.get("", response_model=LedgerRecordListResponse)
def list_ledger_records(
    kind: Optional[LedgerKind] = Query(None),
    product_id: Optional[str] = Query(None),
    include_reversed: bool = Query(False),
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordListResponse:
    """List ledger records of both kinds."""
    return _list_response(
        service.list_ledger_records(
            kind=kind,
            product_id=product_id,
            include_reversed=include_reversed,
        )
    )


@router.get("/{record_id}", response_model=LedgerRecordResponse)
def get_ledger_record(
    record_id: str,
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordResponse:
    """Get ledger record by ID."""
    return LedgerRecordResponse.model_validate(service.get_ledger_record(record_id))


@router.put("/{record_id}", response_model=LedgerRecordResponse)
def update_ledger_record(
    record_id: str,
    request: LedgerRecordUpdateRequest,
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordResponse:
    """Amend a ledger record; stock follows the amended quantity."""
    record = service.update_ledger_record(
        record_id,
        LedgerRecordUpdate(**request.model_dump()),
    )
    return LedgerRecordResponse.model_validate(record)


@router.post("/{record_id}/reverse", response_model=LedgerRecordResponse)
def reverse_ledger_record(
    record_id: str,
    service: InventoryService = Depends(get_inventory_service),
) -> LedgerRecordResponse:
    """Undo a record's stock effect. Idempotent."""
    return LedgerRecordResponse.model_validate(service.reverse_ledger_record(record_id))


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ledger_record(
    record_id: str,
    service: InventoryService = Depends(get_inventory_service),
) -> None:
    """Undo a record's stock effect and delete it."""
    service.delete_ledger_record(record_id)
