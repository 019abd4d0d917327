import logging
import secrets
import string
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from inventory_pro.core.config import settings
from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import unit_of_work
from inventory_pro.core.errors import UserLimitReached, ValidationError
from inventory_pro.core.roles import Role
from inventory_pro.core.security import hash_password
from inventory_pro.models.user import User
from inventory_pro.repositories.tenant_repository import TenantRepository
from inventory_pro.repositories.user_repository import UserRepository
from inventory_pro.services.access_policy import forbid_self_deletion, require_admin
from inventory_pro.services.credential_service import create_principal


logger = logging.getLogger(__name__)

_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_temporary_password(length: Optional[int] = None) -> str:
    length = length or settings.temporary_password_length
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


def list_users(db: Session, ctx: TenantContext) -> List[User]:
    require_admin(ctx)
    return UserRepository(db).list_for_tenant(ctx.tenant_id)


def invite_user(db: Session, ctx: TenantContext, email: str, name: str, role: str) -> Tuple[User, str]:
    """
    Create an active principal in the caller's tenant with a temporary password.

    Returns the principal and the plaintext temporary password; only its hash is stored.
    """
    require_admin(ctx)
    name = (name or "").strip()
    if not email or not name or not role:
        raise ValidationError("Email, name, and role are required")
    if role not in {r.value for r in Role}:
        raise ValidationError("Role must be admin or member")

    users = UserRepository(db)
    temporary_password = generate_temporary_password()
    with unit_of_work(db):
        tenant = TenantRepository(db).get(ctx.tenant_id)
        if users.count(ctx.tenant_id) >= tenant.max_users:
            raise UserLimitReached()
        user = create_principal(
            db,
            tenant_id=ctx.tenant_id,
            email=email,
            name=name,
            password_hash=hash_password(temporary_password),
            role=role,
        )

    logger.info("User %s invited to tenant %s by %s", user.id, ctx.tenant_id, ctx.user_id)
    return user, temporary_password


def delete_user(db: Session, ctx: TenantContext, user_id: int) -> None:
    require_admin(ctx)
    forbid_self_deletion(ctx, user_id)
    with unit_of_work(db):
        UserRepository(db).delete(ctx.tenant_id, user_id)
    logger.info("User %s deleted from tenant %s by %s", user_id, ctx.tenant_id, ctx.user_id)
