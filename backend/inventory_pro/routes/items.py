from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import get_db, run_with_retry
from inventory_pro.core.deps import get_current_context
from inventory_pro.core.serialization_helpers import serialize_item
from inventory_pro.models.item import MAX_QUANTITY
from inventory_pro.services import ledger_service


router = APIRouter()


class ItemCreate(BaseModel):
    name: str
    barcode: str
    quantity: int = Field(0, ge=0, le=MAX_QUANTITY)


class ItemQuantityUpdate(BaseModel):
    id: int
    # Absolute target quantity, not a delta
    quantity: int = Field(..., ge=-MAX_QUANTITY, le=MAX_QUANTITY)


class ItemDelete(BaseModel):
    id: int


@router.get("")
def list_items(db: Session = Depends(get_db), ctx: TenantContext = Depends(get_current_context)):
    return [serialize_item(item) for item in ledger_service.list_items(db, ctx)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_item(data: ItemCreate, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_current_context)):
    item = run_with_retry(lambda: ledger_service.create_item(db, ctx, data.name, data.barcode, data.quantity))
    return serialize_item(item)


@router.put("")
def update_item_quantity(
    data: ItemQuantityUpdate,
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_current_context),
):
    item = run_with_retry(lambda: ledger_service.set_quantity(db, ctx, data.id, data.quantity))
    return serialize_item(item)


@router.delete("")
def delete_item(data: ItemDelete, db: Session = Depends(get_db), ctx: TenantContext = Depends(get_current_context)):
    run_with_retry(lambda: ledger_service.delete_item(db, ctx, data.id))
    return {"success": True}


@router.get("/search")
def search_item(
    barcode: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: TenantContext = Depends(get_current_context),
):
    return serialize_item(ledger_service.find_by_barcode(db, ctx, barcode))
