from datetime import datetime
from typing import List

from inventory_pro.models.activity import Activity
from inventory_pro.repositories.base_repository import TenantScopedRepository


class ActivityRepository(TenantScopedRepository[Activity]):
    model = Activity
    not_found_message = "Activity not found"
    append_only = True

    def append(self, tenant_id: int, entry: Activity) -> Activity:
        return self.insert(tenant_id, entry)

    def recent(self, tenant_id: int, limit: int) -> List[Activity]:
        return self.find(tenant_id, order_by=[Activity.created_at.desc(), Activity.id.desc()], limit=limit)

    def count_since(self, tenant_id: int, since: datetime) -> int:
        return self.count(tenant_id, Activity.created_at >= since)
