import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_pro.core.errors import DuplicateRecord, NotFound
from inventory_pro.models.tenant import Tenant


logger = logging.getLogger(__name__)


class TenantRepository:
    """Tenants are the scope themselves, so lookups are by their own id."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, tenant_id: int) -> Tenant:
        tenant = self.db.query(Tenant).filter(Tenant.id == tenant_id).first()
        if tenant is None:
            raise NotFound("Company not found")
        return tenant

    def code_taken(self, code: str) -> bool:
        return self.db.query(Tenant.id).filter(Tenant.code == code).first() is not None

    def insert(self, tenant: Tenant) -> Tenant:
        self.db.add(tenant)
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.warning("Duplicate tenant code %s", tenant.code)
            raise DuplicateRecord("Company code already exists") from e
        return tenant
