from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from inventory_pro.core.config import settings
from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import get_db, run_with_retry
from inventory_pro.core.deps import require_admin
from inventory_pro.core.roles import Role
from inventory_pro.core.serialization_helpers import serialize_managed_user
from inventory_pro.services import user_service


router = APIRouter()


class InviteRequest(BaseModel):
    email: EmailStr
    name: str
    role: Role


class DeleteUserRequest(BaseModel):
    userId: int


@router.get("")
def list_users(db: Session = Depends(get_db), ctx: TenantContext = Depends(require_admin)):
    return [serialize_managed_user(user) for user in user_service.list_users(db, ctx)]


@router.post("/invite")
def invite_user(data: InviteRequest, db: Session = Depends(get_db), ctx: TenantContext = Depends(require_admin)):
    user, temporary_password = run_with_retry(
        lambda: user_service.invite_user(db, ctx, data.email, data.name, data.role.value)
    )
    body = {
        "success": True,
        "message": "User created with a temporary password",
        "invitationId": user.id,
        "emailSent": False,
        "emailMethod": "temporary_password",
    }
    if settings.expose_temporary_password:
        body["temporaryPassword"] = temporary_password
    return body


@router.delete("/delete")
def delete_user(data: DeleteUserRequest, db: Session = Depends(get_db), ctx: TenantContext = Depends(require_admin)):
    run_with_retry(lambda: user_service.delete_user(db, ctx, data.userId))
    return {"success": True}
