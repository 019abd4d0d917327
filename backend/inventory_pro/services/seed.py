import logging

from sqlalchemy.orm import Session

from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import unit_of_work
from inventory_pro.core.roles import Role
from inventory_pro.core.security import hash_password
from inventory_pro.models.tenant import Tenant
from inventory_pro.repositories.tenant_repository import TenantRepository
from inventory_pro.services import ledger_service
from inventory_pro.services.credential_service import create_principal


logger = logging.getLogger(__name__)

DEMO_CODE = "DEMO001"
DEMO_PASSWORD = "demo123"

DEMO_ITEMS = [
    ("Wireless Headphones", 25),
    ("USB-C Cable", 150),
    ("Laptop Stand", 8),
    ("Bluetooth Mouse", 42),
    ("Phone Case", 3),
    ("Screen Protector", 0),
]


def seed_demo(db: Session) -> None:
    repo = TenantRepository(db)
    if repo.code_taken(DEMO_CODE):
        return

    password_hash = hash_password(DEMO_PASSWORD)
    with unit_of_work(db):
        tenant = repo.insert(Tenant(name="Demo Company", code=DEMO_CODE, subscription_tier="pro", max_users=100))
        admin = create_principal(
            db, tenant.id, "demo@inventorypro.com", "Demo Administrator", password_hash, Role.admin.value
        )
        create_principal(db, tenant.id, "user@inventorypro.com", "Demo User", password_hash, Role.member.value)

    ctx = TenantContext(tenant_id=tenant.id, user_id=admin.id, user_name=admin.name, role=admin.role)
    for index, (name, quantity) in enumerate(DEMO_ITEMS, start=1):
        ledger_service.create_item(db, ctx, name, f"{DEMO_CODE}-{index:06d}", quantity)
    logger.info("Demo company seeded with %s items", len(DEMO_ITEMS))
