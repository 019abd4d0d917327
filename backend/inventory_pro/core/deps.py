from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import get_db
from inventory_pro.core.errors import AuthError, NotFound, TokenRevoked
from inventory_pro.core.security import verify_token
from inventory_pro.repositories.user_repository import UserRepository
from inventory_pro.services.access_policy import require_admin as require_admin_role


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Access token required")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthError("Access token required")
    return token


def get_current_context(db: Session = Depends(get_db), token: str = Depends(get_bearer_token)) -> TenantContext:
    claims = verify_token(token)
    try:
        # Looked up inside the token's tenant, so a token can only ever name its own principal
        user = UserRepository(db).get(claims.tenant_id, claims.user_id)
    except NotFound:
        raise TokenRevoked("User not found")
    if not user.is_active:
        raise TokenRevoked()
    return TenantContext(tenant_id=user.tenant_id, user_id=user.id, user_name=user.name, role=user.role)


def require_admin(ctx: TenantContext = Depends(get_current_context)) -> TenantContext:
    require_admin_role(ctx)
    return ctx
