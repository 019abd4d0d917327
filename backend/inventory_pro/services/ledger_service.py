"""
Inventory ledger.

Every change to an item's quantity is committed together with the audit
entry that describes it, inside one transaction. If either write fails
neither is kept.

Audit entries store the magnitude of the change actually applied; the
direction lives in the entry type. Quantities never go below zero, so a
removal larger than the stock on hand is recorded as the amount that was
really removed.
"""
import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from inventory_pro.core.config import settings
from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import unit_of_work
from inventory_pro.core.errors import DuplicateBarcode, DuplicateRecord, NotFound, ValidationError
from inventory_pro.models.activity import Activity, ActivityType
from inventory_pro.models.item import MAX_QUANTITY, Item
from inventory_pro.repositories.activity_repository import ActivityRepository
from inventory_pro.repositories.item_repository import ItemRepository


logger = logging.getLogger(__name__)


def _audit_entry(
    ctx: TenantContext,
    item: Item,
    entry_type: ActivityType,
    quantity_delta: Optional[int],
    prior_quantity: int,
    item_id: Optional[int],
) -> Activity:
    return Activity(
        type=entry_type.value,
        quantity_delta=quantity_delta,
        prior_quantity=prior_quantity,
        item_name=item.name,
        user_name=ctx.user_name,
        item_id=item_id,
        user_id=ctx.user_id,
    )


def list_items(db: Session, ctx: TenantContext) -> List[Item]:
    return ItemRepository(db).list_for_tenant(ctx.tenant_id)


def find_by_barcode(db: Session, ctx: TenantContext, barcode: str) -> Item:
    barcode = (barcode or "").strip()
    if not barcode:
        raise ValidationError("Barcode parameter is required")
    item = ItemRepository(db).find_by_barcode(ctx.tenant_id, barcode)
    if item is None:
        raise NotFound("Item not found")
    return item


def list_activities(db: Session, ctx: TenantContext, limit: Optional[int] = None) -> List[Activity]:
    return ActivityRepository(db).recent(ctx.tenant_id, limit or settings.activity_feed_limit)


def create_item(db: Session, ctx: TenantContext, name: str, barcode: str, initial_quantity: int = 0) -> Item:
    name = (name or "").strip()
    barcode = (barcode or "").strip()
    if not name or not barcode:
        raise ValidationError("Name and barcode are required")
    if initial_quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    if initial_quantity > MAX_QUANTITY:
        raise ValidationError("Quantity is too large")

    items = ItemRepository(db)
    activities = ActivityRepository(db)
    with unit_of_work(db):
        if items.barcode_taken(ctx.tenant_id, barcode, settings.barcode_scope):
            raise DuplicateBarcode()
        try:
            item = items.insert(ctx.tenant_id, Item(name=name, barcode=barcode, quantity=initial_quantity))
        except DuplicateRecord as e:
            raise DuplicateBarcode() from e
        activities.append(
            ctx.tenant_id,
            _audit_entry(ctx, item, ActivityType.created, initial_quantity, 0, item.id),
        )

    logger.info("Item %s created in tenant %s with quantity %s", item.id, ctx.tenant_id, initial_quantity)
    return item


def _apply_quantity_change(
    db: Session,
    ctx: TenantContext,
    item_id: int,
    next_quantity: Callable[[int], int],
) -> Item:
    items = ItemRepository(db)
    activities = ActivityRepository(db)
    with unit_of_work(db):
        # Read and write the same locked row so the entry always matches the stored quantity
        item = items.get(ctx.tenant_id, item_id, for_update=True)
        prior = item.quantity
        new_quantity = max(0, next_quantity(prior))
        if new_quantity > MAX_QUANTITY:
            raise ValidationError("Quantity is too large")
        effective = new_quantity - prior

        if effective == 0 and not settings.record_zero_delta_adjustments:
            return item

        if effective != 0:
            items.update(ctx.tenant_id, item.id, {"quantity": new_quantity})
        entry_type = ActivityType.added if effective > 0 else ActivityType.removed
        activities.append(
            ctx.tenant_id,
            _audit_entry(ctx, item, entry_type, abs(effective), prior, item.id),
        )

    logger.info("Item %s quantity %s -> %s in tenant %s", item_id, prior, new_quantity, ctx.tenant_id)
    return item


def adjust_quantity(db: Session, ctx: TenantContext, item_id: int, delta: int) -> Item:
    """Add delta (may be negative) to the item's quantity, clamping at zero."""
    return _apply_quantity_change(db, ctx, item_id, lambda current: current + delta)


def set_quantity(db: Session, ctx: TenantContext, item_id: int, quantity: int) -> Item:
    """Move the item to an absolute target quantity; negative targets clamp to zero."""
    return _apply_quantity_change(db, ctx, item_id, lambda current: quantity)


def delete_item(db: Session, ctx: TenantContext, item_id: int) -> None:
    items = ItemRepository(db)
    activities = ActivityRepository(db)
    with unit_of_work(db):
        item = items.get(ctx.tenant_id, item_id, for_update=True)
        # The entry is written first and outlives the item; older entries lose their item_id
        activities.append(
            ctx.tenant_id,
            _audit_entry(ctx, item, ActivityType.deleted, None, item.quantity, None),
        )
        items.delete(ctx.tenant_id, item.id)

    logger.info("Item %s deleted from tenant %s", item_id, ctx.tenant_id)
