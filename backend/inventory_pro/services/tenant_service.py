import logging
import secrets
from typing import Tuple

from sqlalchemy.orm import Session

from inventory_pro.core.config import settings
from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import unit_of_work
from inventory_pro.core.errors import ValidationError
from inventory_pro.core.roles import Role
from inventory_pro.core.security import hash_password
from inventory_pro.models.tenant import Tenant
from inventory_pro.models.user import User
from inventory_pro.repositories.tenant_repository import TenantRepository
from inventory_pro.services.credential_service import create_principal


logger = logging.getLogger(__name__)

CODE_ATTEMPTS = 20


def _random_digits(width: int) -> str:
    return str(secrets.randbelow(10 ** width)).zfill(width)


def generate_company_code(repo: TenantRepository, company_name: str) -> str:
    """Three letters of the company name plus three digits, extended on collision."""
    prefix = "".join(ch for ch in company_name.upper() if ch.isalnum())[:3] or "CMP"
    code = prefix + _random_digits(3)
    for _ in range(CODE_ATTEMPTS):
        if not repo.code_taken(code):
            return code
        code = prefix + _random_digits(3) + _random_digits(2)
    raise ValidationError("Could not allocate a company code, please retry")


def register_company(
    db: Session,
    company_name: str,
    admin_email: str,
    admin_password: str,
    admin_name: str,
) -> Tuple[Tenant, User]:
    company_name = (company_name or "").strip()
    admin_name = (admin_name or "").strip()
    if not company_name or not admin_email or not admin_password or not admin_name:
        raise ValidationError("All fields are required")
    if len(admin_password) < settings.min_password_length:
        raise ValidationError(f"Password must be at least {settings.min_password_length} characters")

    repo = TenantRepository(db)
    with unit_of_work(db):
        tenant = Tenant(
            name=company_name,
            code=generate_company_code(repo, company_name),
            subscription_tier=settings.default_subscription_tier,
            max_users=settings.default_max_users,
        )
        repo.insert(tenant)
        admin = create_principal(
            db,
            tenant_id=tenant.id,
            email=admin_email,
            name=admin_name,
            password_hash=hash_password(admin_password),
            role=Role.admin.value,
        )

    logger.info("Company %s registered with code %s", tenant.id, tenant.code)
    return tenant, admin


def get_company(db: Session, ctx: TenantContext) -> Tenant:
    return TenantRepository(db).get(ctx.tenant_id)
