from typing import List, Optional

from sqlalchemy import func

from inventory_pro.models.item import Item
from inventory_pro.repositories.base_repository import TenantScopedRepository


class ItemRepository(TenantScopedRepository[Item]):
    model = Item
    not_found_message = "Item not found"
    # Barcode is assigned once at creation
    immutable_fields = TenantScopedRepository.immutable_fields | {"barcode"}

    def list_for_tenant(self, tenant_id: int) -> List[Item]:
        return self.find(tenant_id, order_by=[Item.created_at.desc(), Item.id.desc()])

    def find_by_barcode(self, tenant_id: int, barcode: str) -> Optional[Item]:
        return self.first(tenant_id, barcode=barcode)

    def barcode_taken(self, tenant_id: int, barcode: str, scope: str) -> bool:
        if scope == "tenant":
            return self.find_by_barcode(tenant_id, barcode) is not None
        return self.exists_anywhere(barcode=barcode)

    def total_quantity(self, tenant_id: int) -> int:
        with self._session_operation("total_quantity", is_read_only=True):
            total = self._scoped(tenant_id).with_entities(func.coalesce(func.sum(Item.quantity), 0)).scalar()
        return int(total or 0)
