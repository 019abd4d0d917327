from datetime import timedelta
from typing import Any, Dict

from sqlalchemy.orm import Session

from inventory_pro.core.config import settings
from inventory_pro.core.context import TenantContext
from inventory_pro.models.item import Item
from inventory_pro.models.tenant import utcnow
from inventory_pro.repositories.activity_repository import ActivityRepository
from inventory_pro.repositories.item_repository import ItemRepository


def get_analytics(db: Session, ctx: TenantContext) -> Dict[str, Any]:
    """Stock summary for the caller's tenant plus audit volume over the last day"""
    items = ItemRepository(db)
    return {
        "totalItems": items.count(ctx.tenant_id),
        "totalQuantity": items.total_quantity(ctx.tenant_id),
        "lowStockItems": items.count(
            ctx.tenant_id, Item.quantity > 0, Item.quantity <= settings.low_stock_threshold
        ),
        "outOfStockItems": items.count(ctx.tenant_id, quantity=0),
        "recentActivities": ActivityRepository(db).count_since(ctx.tenant_id, utcnow() - timedelta(hours=24)),
    }
